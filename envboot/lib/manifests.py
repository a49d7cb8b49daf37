from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ProfileError
from ..models import Package, PackageKind, Platform

logger = logging.getLogger(__name__)


def default_profiles_dir():
    """Profiles shipped as package data (envboot/profiles/*.yaml).

    Returns an importlib.resources Traversable, which works whether the
    package is installed from a wheel, in editable mode, or from source.
    """
    return resources.files("envboot") / "profiles"


def _read_text(source: Any) -> str:
    try:
        return source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileError(f"Could not read profile {source}: {e}") from e


def _parse_yaml(text: str, origin: str) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load profiles") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid profile document {origin}: {e}") from e
    if not isinstance(data, dict):
        raise ProfileError(f"Profile must be a mapping/dict: {origin}")
    return data


def _entry_to_package(entry: Any, kind: PackageKind, origin: str) -> Package:
    if isinstance(entry, str):
        ident = entry.strip()
        if not ident:
            raise ProfileError(f"Empty package identifier in {origin}")
        return Package(identifier=ident, kind=kind)

    if isinstance(entry, dict):
        ident = str(entry.get("id") or "").strip()
        if not ident:
            raise ProfileError(f"Package entry without id in {origin}: {entry!r}")
        args = entry.get("args") or []
        if not isinstance(args, list):
            raise ProfileError(f"Package {ident} args must be a list ({origin})")
        return Package(
            identifier=ident,
            name=str(entry.get("name") or ""),
            kind=kind,
            install_args=tuple(str(a) for a in args),
        )

    raise ProfileError(f"Unsupported package entry in {origin}: {entry!r}")


def _entry_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ProfileError(f"{where} must be a list")
    return value


def packages_for(doc: Dict[str, Any], platform: Platform, *, origin: str = "<profile>") -> List[Package]:
    """Materialize the ordered package list of a profile document for one platform.

    windows: flat list of identifiers (generic packages).
    macos: {formulae: [...], casks: [...]}, formulae first.
    """

    section = doc.get(platform.os_class)
    if section is None:
        logger.info("Profile %s has no %s section", origin, platform.os_class)
        return []

    if platform.is_windows:
        entries = _entry_list(section, f"{origin}: windows")
        return [_entry_to_package(e, PackageKind.GENERIC, origin) for e in entries]

    if not isinstance(section, dict):
        raise ProfileError(f"{origin}: macos must be a mapping with formulae/casks")
    packages = [
        _entry_to_package(e, PackageKind.FORMULA, origin)
        for e in _entry_list(section.get("formulae"), f"{origin}: macos.formulae")
    ]
    packages += [
        _entry_to_package(e, PackageKind.CASK, origin)
        for e in _entry_list(section.get("casks"), f"{origin}: macos.casks")
    ]
    return packages


def load_profile_file(path: Any) -> Dict[str, Any]:
    """Load a profile from a path (str, Path or importlib.resources Traversable)."""
    p = Path(path) if isinstance(path, str) else path
    if isinstance(p, Path) and not p.exists():
        raise ProfileError(f"Profile not found: {p}")
    return _parse_yaml(_read_text(p), str(p))


def load_profile(profile_id: str, profiles_dir: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load <profiles_dir>/<profile_id>.yaml (the bundled profiles by default)."""
    base = Path(profiles_dir) if profiles_dir else default_profiles_dir()
    for suffix in (".yaml", ".yml"):
        p = base / f"{profile_id}{suffix}"
        if p.is_file():
            return load_profile_file(p)
    raise ProfileError(f"Profile {profile_id!r} not found in {base}")


def load_profile_url(
    url: str,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 30.0,
) -> Dict[str, Any]:
    """Fetch a profile document over HTTP(S)."""

    logger.info("Fetching profile %s", url)
    try:
        if client is None:
            resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        else:
            resp = client.get(url, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise ProfileError(f"Could not fetch profile {url}: {e}") from e
    return _parse_yaml(resp.text, url)
