from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from .models import Platform, ReconciliationReport

logger = logging.getLogger(__name__)

MAX_RUNS = 20


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def _yaml():
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("YAML state requested but PyYAML is not available. Use a .json state file.") from e
    return yaml


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    text = p.read_text(encoding="utf-8")
    if _detect_format(p) == "json":
        data = json.loads(text)
    else:
        yaml = _yaml()
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML state {p}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) == "json":
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    else:
        p.write_text(_yaml().safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with defaults (without overriding existing values)."""

    state.setdefault("version", 1)
    state.setdefault("platform", None)
    state.setdefault("runs", [])
    return state


def record_run(
    state: Dict[str, Any],
    *,
    profile: str,
    platform: Platform,
    report: ReconciliationReport,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """Append a finished run to the history, keeping the most recent MAX_RUNS."""

    ensure_defaults(state)
    state["platform"] = platform.os_class
    entry = {
        "profile": profile,
        "platform": platform.os_class,
        "dry_run": dry_run,
        "finished_at": datetime.now(timezone.utc).isoformat(),
        **report.to_dict(),
    }
    runs = state.get("runs")
    runs = list(runs) if isinstance(runs, list) else []
    runs.append(entry)
    state["runs"] = runs[-MAX_RUNS:]
    logger.info("Recorded run (profile=%s counts=%s)", profile, entry["counts"])
    return state
