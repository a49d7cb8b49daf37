from __future__ import annotations

import logging
import os
import shutil
from typing import Callable, List, Optional, Tuple

from ..models import InstallResult, Package, PackageKind
from .pkg import PackageManagerAdapter

logger = logging.getLogger(__name__)

# Apple Silicon first, then Intel.
DEFAULT_PREFIXES = ("/opt/homebrew", "/usr/local")


class HomebrewAdapter(PackageManagerAdapter):
    """Homebrew formulae and casks.

    A freshly installed Homebrew is usually not on PATH yet, so the adapter
    also looks for `brew` under the standard prefixes. After a successful
    install it reports the prefix bin/sbin directories for the caller to put
    on PATH (the `brew shellenv` effect) instead of editing os.environ.
    """

    name = "brew"

    def __init__(
        self,
        *,
        prefix: Optional[str] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        exists: Callable[[str], bool] = os.path.exists,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.prefix = prefix
        self._which = which
        self._exists = exists

    def _candidates(self) -> List[str]:
        prefixes = (self.prefix,) if self.prefix else DEFAULT_PREFIXES
        return [os.path.join(p, "bin", "brew") for p in prefixes]

    def find_brew(self) -> Optional[str]:
        if not self.prefix:
            found = self._which("brew")
            if found:
                return found
        for candidate in self._candidates():
            if self._exists(candidate):
                return candidate
        return None

    def is_available(self) -> bool:
        return self.find_brew() is not None

    def path_entries(self) -> Tuple[str, ...]:
        brew = self.find_brew()
        if not brew:
            return ()
        prefix = os.path.dirname(os.path.dirname(brew))
        return (os.path.join(prefix, "bin"), os.path.join(prefix, "sbin"))

    @staticmethod
    def _kind_flag(package: Package) -> str:
        return "--cask" if package.kind is PackageKind.CASK else "--formula"

    def is_installed(self, package: Package) -> bool:
        brew = self.find_brew()
        if not brew:
            return False
        r = self._query([brew, "list", self._kind_flag(package), package.identifier])
        return r is not None and r.returncode == 0

    def install(self, package: Package) -> InstallResult:
        brew = self.find_brew()
        if not brew:
            return InstallResult(ok=False, detail="brew not found")

        argv = [brew, "install"]
        if package.kind is PackageKind.CASK:
            argv.append("--cask")
        argv += [*package.install_args, package.identifier]

        result = self._run_install(argv, package)
        if not result.ok:
            return result
        return InstallResult(ok=True, detail=result.detail, path_entries=self.path_entries())
