from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from envboot.lib.command import CmdResult
from envboot.lib.pkg import PackageManagerAdapter
from envboot.models import InstallResult, Package


class FakeAdapter(PackageManagerAdapter):
    """In-memory package manager: `installed` is its package database."""

    name = "fake"

    def __init__(
        self,
        *,
        installed: Sequence[str] = (),
        available: bool = True,
        failures: Optional[Dict[str, str]] = None,
        path_entries: Sequence[str] = (),
    ) -> None:
        super().__init__()
        self.installed = set(installed)
        self.available = available
        self.failures = dict(failures or {})
        self.path_entries = tuple(path_entries)
        self.calls: List[tuple] = []

    def is_available(self) -> bool:
        self.calls.append(("is_available",))
        return self.available

    def is_installed(self, package: Package) -> bool:
        self.calls.append(("is_installed", package.identifier))
        return package.identifier in self.installed

    def install(self, package: Package) -> InstallResult:
        self.calls.append(("install", package.identifier))
        if package.identifier in self.failures:
            return InstallResult(ok=False, detail=self.failures[package.identifier])
        self.installed.add(package.identifier)
        return InstallResult(ok=True, path_entries=self.path_entries)

    @property
    def install_calls(self) -> List[str]:
        return [c[1] for c in self.calls if c[0] == "install"]


class FakeRunner:
    """Stands in for run_cmd; `respond` maps argv to (returncode, stdout, stderr)."""

    def __init__(self, respond: Callable[[List[str]], tuple]) -> None:
        self.respond = respond
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []

    def __call__(self, argv, **kwargs) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        self.kwargs.append(kwargs)
        if kwargs.get("dry_run"):
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")
        rc, out, err = self.respond(argv)
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)


def raising_runner(exc: Exception) -> Callable[..., CmdResult]:
    def _run(argv, **kwargs):
        raise exc

    return _run
