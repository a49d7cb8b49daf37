from __future__ import annotations

import logging
import re
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..models import InstallResult, Package, Platform
from .command import CmdResult, Runner, run_cmd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutcomeRule:
    """Maps (tool, exit code, output pattern) to success/failure.

    None on exit_code or pattern means "any". Patterns are regular
    expressions searched case-insensitively, line by line, in stdout+stderr;
    `{id}` stands for the (escaped) identifier being installed, so a message
    about some other package never matches.
    """

    tool: str
    exit_code: Optional[int]
    pattern: Optional[str]
    ok: bool
    reason: str

    def matches(self, tool: str, exit_code: int, output: str, identifier: str) -> bool:
        if self.tool not in {tool, "*"}:
            return False
        if self.exit_code is not None and self.exit_code != exit_code:
            return False
        if self.pattern is not None:
            regex = self.pattern.replace("{id}", re.escape(identifier))
            if not re.search(regex, output, re.IGNORECASE | re.MULTILINE):
                return False
        return True


# First match wins.
OUTCOME_RULES: Tuple[OutcomeRule, ...] = (
    OutcomeRule("*", 0, None, True, "exit code 0"),
    # APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE (0x8A15002B)
    OutcomeRule("winget", -1978335189, None, True, "no applicable upgrade"),
    # APPINSTALLER_CLI_ERROR_PACKAGE_ALREADY_INSTALLED (0x8A150061)
    OutcomeRule("winget", -1978335135, None, True, "package already installed"),
    # winget installs exactly one package per call, so this line is about it.
    OutcomeRule("winget", None, r"^\s*Found an existing package already installed", True, "already installed"),
    OutcomeRule("brew", None, r"^Warning: {id} \S+ is already installed and up-to-date", True, "already installed"),
    OutcomeRule("brew", None, r"^Warning: Cask '{id}' is already installed", True, "already installed"),
)


def normalize_exit_code(code: int) -> int:
    """Windows reports exit codes as unsigned 32-bit values; fold them to signed."""
    if code >= 2**31:
        return code - 2**32
    return code


def _failure_detail(result: CmdResult, exit_code: int) -> str:
    for text in (result.stderr, result.stdout):
        lines = [ln.strip() for ln in (text or "").splitlines() if ln.strip()]
        if lines:
            return lines[-1]
    return f"exit code {exit_code}"


def classify(tool: str, result: CmdResult, identifier: str) -> InstallResult:
    """Turn the raw result of installing `identifier` into an InstallResult."""

    exit_code = normalize_exit_code(result.returncode)
    output = result.output
    for rule in OUTCOME_RULES:
        if rule.matches(tool, exit_code, output, identifier):
            logger.debug("%s exit=%s matched rule: %s", tool, exit_code, rule.reason)
            if rule.ok:
                return InstallResult(ok=True)
            return InstallResult(ok=False, detail=rule.reason)
    return InstallResult(ok=False, detail=_failure_detail(result, exit_code))


class PackageManagerAdapter(ABC):
    """Install/query capability of one platform package manager.

    Adapters never raise for package-level problems: a tool that cannot be
    launched is a failed InstallResult (or False for queries).
    """

    name: str = ""

    def __init__(
        self,
        *,
        runner: Runner = run_cmd,
        dry_run: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        self.runner = runner
        self.dry_run = dry_run
        self.timeout = timeout

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def is_installed(self, package: Package) -> bool:
        ...

    @abstractmethod
    def install(self, package: Package) -> InstallResult:
        ...

    def _query(self, argv: Sequence[str]) -> Optional[CmdResult]:
        try:
            return self.runner(argv, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("%s query failed to run: %s", self.name, e)
            return None

    def _run_install(self, argv: Sequence[str], package: Package) -> InstallResult:
        try:
            result = self.runner(argv, timeout=self.timeout, dry_run=self.dry_run)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("%s install failed to run: %s", self.name, e)
            return InstallResult(ok=False, detail=str(e))
        return classify(self.name, result, package.identifier)


def adapter_for(platform: Platform, **options) -> PackageManagerAdapter:
    """Select the adapter for the detected platform."""

    if platform.is_windows:
        from .winget import WinGetAdapter

        return WinGetAdapter(**options)

    from .brew import HomebrewAdapter

    return HomebrewAdapter(**options)
