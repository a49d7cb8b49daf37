from __future__ import annotations

import logging
from typing import List, Sequence

from .lib.pkg import PackageManagerAdapter
from .models import InstallOutcome, InstallStatus, Package, Platform, ReconciliationReport

logger = logging.getLogger(__name__)

UNAVAILABLE_DETAIL = "package manager unavailable"


def reconcile(
    platform: Platform,
    adapter: PackageManagerAdapter,
    desired: Sequence[Package],
) -> ReconciliationReport:
    """Install whatever in `desired` is missing, one package at a time.

    Returns one outcome per input package, in input order. Package-level
    problems (missing tool, failed install) become Failed outcomes; nothing
    already installed earlier in the batch is rolled back.
    """

    outcomes: List[InstallOutcome] = []
    path_entries: List[str] = []

    logger.info(
        "Reconciling %d package(s) on %s via %s",
        len(desired),
        platform.os_class,
        adapter.name or type(adapter).__name__,
    )

    for package in desired:
        if not adapter.is_available():
            outcome = InstallOutcome(package, InstallStatus.FAILED, UNAVAILABLE_DETAIL)
        elif adapter.is_installed(package):
            outcome = InstallOutcome(package, InstallStatus.ALREADY_PRESENT)
        else:
            logger.info("Installing %s (%s)", package.name, package.identifier)
            result = adapter.install(package)
            if result.ok:
                outcome = InstallOutcome(package, InstallStatus.INSTALLED)
                for entry in result.path_entries:
                    if entry not in path_entries:
                        path_entries.append(entry)
            else:
                outcome = InstallOutcome(package, InstallStatus.FAILED, result.detail or "install failed")

        if outcome.failed:
            logger.warning("%s: %s (%s)", package.identifier, outcome.status.value, outcome.detail)
        else:
            logger.info("%s: %s", package.identifier, outcome.status.value)
        outcomes.append(outcome)

    return ReconciliationReport(outcomes=tuple(outcomes), path_entries=tuple(path_entries))
