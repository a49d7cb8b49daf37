from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import UnsupportedPlatformError

SUPPORTED_OS_CLASSES = ("windows", "macos")


class PackageKind(str, Enum):
    FORMULA = "formula"
    CASK = "cask"
    GENERIC = "generic"


class InstallStatus(str, Enum):
    ALREADY_PRESENT = "AlreadyPresent"
    INSTALLED = "Installed"
    FAILED = "Failed"


@dataclass(frozen=True)
class Platform:
    os_class: str

    def __post_init__(self) -> None:
        if self.os_class not in SUPPORTED_OS_CLASSES:
            raise UnsupportedPlatformError(
                f"Unsupported platform: {self.os_class!r} (supported: {', '.join(SUPPORTED_OS_CLASSES)})"
            )

    @property
    def is_windows(self) -> bool:
        return self.os_class == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os_class == "macos"


@dataclass(frozen=True)
class Package:
    """A logical software unit to install.

    Identity is (identifier, kind); name is only used for display.
    """

    identifier: str
    name: str = field(default="", compare=False)
    kind: PackageKind = PackageKind.GENERIC
    install_args: Tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("Package identifier must not be empty")
        if not self.name:
            object.__setattr__(self, "name", self.identifier)
        object.__setattr__(self, "install_args", tuple(str(a) for a in self.install_args))

    @property
    def key(self) -> Tuple[str, PackageKind]:
        return (self.identifier, self.kind)


@dataclass(frozen=True)
class InstallResult:
    """Normalized result of one adapter install call."""

    ok: bool
    detail: Optional[str] = None
    path_entries: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InstallOutcome:
    package: Package
    status: InstallStatus
    detail: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status is not InstallStatus.FAILED and self.detail is not None:
            raise ValueError("detail is only allowed on failed outcomes")

    @property
    def failed(self) -> bool:
        return self.status is InstallStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "name": self.package.name,
            "identifier": self.package.identifier,
            "kind": self.package.kind.value,
            "status": self.status.value,
        }
        if self.detail is not None:
            d["detail"] = self.detail
        return d


@dataclass(frozen=True)
class ReconciliationReport:
    outcomes: Tuple[InstallOutcome, ...] = ()
    path_entries: Tuple[str, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    @property
    def failures(self) -> List[InstallOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def exit_code(self) -> int:
        return 1 if self.failure_count else 0

    def counts(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in InstallStatus}
        for o in self.outcomes:
            counts[o.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcomes": [o.to_dict() for o in self.outcomes],
            "counts": self.counts(),
            "path_entries": list(self.path_entries),
        }
