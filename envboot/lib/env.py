from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, MutableMapping

_HOME = Path.home() / ".envboot"


@dataclass(frozen=True)
class Paths:
    config_default: str = str(_HOME / "config.yaml")
    state_default: str = str(_HOME / "state.json")
    log_default: str = str(_HOME / "envboot.log")


PATHS = Paths()


def prepend_path(entries: Iterable[str], environ: MutableMapping[str, str] | None = None) -> List[str]:
    """Put `entries` at the front of PATH (process-local), skipping ones already there.

    Returns the entries that were actually added.
    """

    env = os.environ if environ is None else environ
    current = [p for p in env.get("PATH", "").split(os.pathsep) if p]
    added = [e for e in dict.fromkeys(entries) if e and e not in current]
    if added:
        env["PATH"] = os.pathsep.join(added + current)
    return added
