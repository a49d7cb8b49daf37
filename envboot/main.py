from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import BootstrapConfig, load_config
from .errors import EnvbootError
from .formatting import format_report, render_rich, report_to_json
from .lib.env import PATHS, prepend_path
from .lib.manifests import load_profile, load_profile_file, load_profile_url, packages_for
from .lib.pkg import PackageManagerAdapter, adapter_for
from .lib.platform import detect
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .models import Package, Platform, ReconciliationReport
from .reconcile import reconcile
from .state_store import ensure_defaults, load_state, record_run, save_state

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = PATHS.state_default
DEFAULT_CONFIG_PATH = PATHS.config_default

EXIT_FATAL = 2


def resolve_packages(
    platform: Platform,
    *,
    cfg: BootstrapConfig,
    profile: Optional[str] = None,
    profile_file: Optional[str] = None,
    profile_url: Optional[str] = None,
) -> tuple[str, List[Package]]:
    """Pick the profile source (file > url > named profile) and materialize it."""

    url = profile_url or (None if (profile or profile_file) else cfg.profile_url)
    if profile_file:
        label = profile_file
        doc = load_profile_file(profile_file)
    elif url:
        label = url
        doc = load_profile_url(url)
    else:
        label = profile or cfg.profile
        doc = load_profile(label, cfg.profiles_dir)

    return label, packages_for(doc, platform, origin=label)


def build_adapter(platform: Platform, cfg: BootstrapConfig, *, dry_run: bool) -> PackageManagerAdapter:
    options: Dict[str, Any] = {"dry_run": dry_run, "timeout": cfg.timeout}
    if platform.is_windows:
        options["source"] = cfg.winget_source
    else:
        options["prefix"] = cfg.brew_prefix
    return adapter_for(platform, **options)


def run(
    *,
    cfg: BootstrapConfig,
    state_path: str = DEFAULT_STATE_PATH,
    profile: Optional[str] = None,
    profile_file: Optional[str] = None,
    profile_url: Optional[str] = None,
    dry_run: Optional[bool] = None,
    adapter: Optional[PackageManagerAdapter] = None,
    platform: Optional[Platform] = None,
) -> ReconciliationReport:
    """Detect the platform, reconcile the profile and record the run."""

    platform = platform or detect()
    dry_run = cfg.dry_run if dry_run is None else dry_run

    label, desired = resolve_packages(
        platform,
        cfg=cfg,
        profile=profile,
        profile_file=profile_file,
        profile_url=profile_url,
    )
    adapter = adapter or build_adapter(platform, cfg, dry_run=dry_run)

    report = reconcile(platform, adapter, desired)

    added = prepend_path(report.path_entries)
    if added:
        logger.info("Prepended to PATH for this session: %s", ", ".join(added))

    # History only; a state file that cannot be read or written is logged and skipped.
    try:
        state = ensure_defaults(load_state(state_path))
        record_run(state, profile=label, platform=platform, report=report, dry_run=dry_run)
        save_state(state_path, state)
    except (OSError, ValueError) as e:
        logger.warning("Could not record run in %s: %s", state_path, e)
    return report


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="envboot", description="Install the packages of a profile that are missing.")
    src = p.add_mutually_exclusive_group()
    src.add_argument("--profile", default=None, help="Profile name under the profiles directory")
    src.add_argument("--profile-file", default=None, help="Path to a profile document (yaml|json)")
    src.add_argument("--profile-url", default=None, help="URL of a profile document")
    p.add_argument("--config", default=None, help=f"Config file (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to run state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dry-run", action="store_true", default=None, help="Log install commands without running them")
    p.add_argument("--timeout", type=float, default=None, help="Per-command timeout in seconds")
    out = p.add_mutually_exclusive_group()
    out.add_argument("--ui", action="store_true", help="Render the report as a table")
    out.add_argument("--json", action="store_true", help="Print the report as JSON")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging (includes command output)")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = load_config(args.config or DEFAULT_CONFIG_PATH, required=args.config is not None)
        if args.timeout is not None:
            cfg = BootstrapConfig(raw={**cfg.raw, "timeout": args.timeout})

        report = run(
            cfg=cfg,
            state_path=args.state,
            profile=args.profile,
            profile_file=args.profile_file,
            profile_url=args.profile_url,
            dry_run=args.dry_run,
        )
    except EnvbootError as e:
        logger.error("%s", e)
        print(f"envboot: {e}", file=sys.stderr)
        return EXIT_FATAL
    except Exception:
        logger.exception("Bootstrap failed")
        raise

    if args.json:
        print(report_to_json(report))
    elif args.ui:
        render_rich(report)
    else:
        print(format_report(report))

    return report.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
