from __future__ import annotations

import logging
import shutil
from typing import Callable, List, Optional

from ..models import InstallResult, Package
from .pkg import PackageManagerAdapter

logger = logging.getLogger(__name__)

AGREEMENT_ARGS = ["--accept-source-agreements"]


class WinGetAdapter(PackageManagerAdapter):
    name = "winget"

    def __init__(
        self,
        *,
        source: Optional[str] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.source = source
        self._which = which

    @property
    def exe(self) -> str:
        return self._which("winget") or "winget"

    def _source_args(self) -> List[str]:
        return ["--source", self.source] if self.source else []

    def is_available(self) -> bool:
        return self._which("winget") is not None

    def is_installed(self, package: Package) -> bool:
        argv = [self.exe, "list", "--exact", "--id", package.identifier, *self._source_args(), *AGREEMENT_ARGS]
        r = self._query(argv)
        if r is None or r.returncode != 0:
            return False
        # winget list prints a table; a zero exit alone is not trusted.
        return package.identifier.lower() in r.output.lower()

    def install(self, package: Package) -> InstallResult:
        argv = [
            self.exe,
            "install",
            "--exact",
            "--id",
            package.identifier,
            *self._source_args(),
            "--silent",
            "--accept-package-agreements",
            *AGREEMENT_ARGS,
            *package.install_args,
        ]
        return self._run_install(argv, package)
