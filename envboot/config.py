from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def profile(self) -> str:
        return str(self.raw.get("profile") or "default")

    @property
    def profiles_dir(self) -> Optional[str]:
        v = self.raw.get("profiles_dir")
        return str(Path(str(v)).expanduser()) if v else None

    @property
    def profile_url(self) -> Optional[str]:
        v = self.raw.get("profile_url")
        return str(v) if v else None

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def timeout(self) -> Optional[float]:
        v = self.raw.get("timeout")
        return float(v) if v is not None else None

    @property
    def winget_source(self) -> Optional[str]:
        v = (self.raw.get("winget") or {}).get("source")
        return str(v) if v else None

    @property
    def brew_prefix(self) -> Optional[str]:
        v = (self.raw.get("brew") or {}).get("prefix")
        return str(v) if v else None


def load_config(path: str, *, required: bool = False) -> BootstrapConfig:
    """Read the YAML config file.

    A missing file is only an error when it was asked for explicitly.
    """

    p = Path(path).expanduser()
    if not p.exists():
        if required:
            raise ConfigError(f"Config file not found: {p}")
        return BootstrapConfig()

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"Config must be YAML: {p}")

    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the config file") from e

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config {p}: {e}") from e

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")

    for section in ("winget", "brew"):
        if not isinstance(raw.get(section) or {}, dict):
            raise ConfigError(f"{p}: {section} must be a mapping")

    if "dry_run" in raw and not isinstance(raw["dry_run"], bool):
        raise ConfigError(f"{p}: dry_run must be true or false, got {raw['dry_run']!r}")

    timeout = raw.get("timeout")
    if timeout is not None:
        # YAML booleans are ints in Python; reject them explicitly.
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"{p}: timeout must be a positive number of seconds, got {timeout!r}")

    return BootstrapConfig(raw=raw)
