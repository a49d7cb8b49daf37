from __future__ import annotations

import logging
import platform as platform_module
from typing import Optional

from ..errors import UnsupportedPlatformError
from ..models import Platform

logger = logging.getLogger(__name__)

_OS_CLASS_MAP = {
    "windows": "windows",
    "darwin": "macos",
}


def detect(system: Optional[str] = None) -> Platform:
    """Identify the running OS class.

    `system` defaults to platform.system(); passing it explicitly keeps the
    mapping testable on any host.
    """

    raw = platform_module.system() if system is None else system
    os_class = _OS_CLASS_MAP.get(raw.strip().lower())
    if os_class is None:
        raise UnsupportedPlatformError(f"Unsupported platform: {raw!r} (supported: Windows, macOS)")

    logger.info("Detected platform %s (system=%s)", os_class, raw)
    return Platform(os_class=os_class)
