from __future__ import annotations

import argparse
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import SetupConfig, load_setup_config, require_home
from .context import RunContext, Runner
from .lib.command import CommandError, run_cmd
from .lib.env import Paths
from .logging_utils import configure_logging, section
from .pipeline import PipelineAborted, Step, run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    BasePackagesStep,
    CleanupDownloadsStep,
    FinalUpdateStep,
    FnmStep,
    NeovimStep,
    NerdFontStep,
    NodeGlobalPackageStep,
    NodeStep,
    NushellStep,
    NvimConfigBackupStep,
    NvimConfigCloneStep,
    RustStep,
    SnapAppStep,
    SnapdStep,
    StarshipStep,
    SystemUpdateStep,
    TmuxConfigStep,
    VersionReportStep,
)

logger = logging.getLogger(__name__)


def build_steps(cfg: SetupConfig) -> List[Step]:
    steps: List[Step] = [
        SystemUpdateStep(),
        BasePackagesStep(),
        RustStep(),
        NushellStep(),
        TmuxConfigStep(),
        NeovimStep(),
        NerdFontStep(),
        StarshipStep(),
        NvimConfigBackupStep(),
        FnmStep(),
        NodeStep(),
    ]
    steps += [NodeGlobalPackageStep(p) for p in cfg.node_global_packages]
    steps += [
        NvimConfigCloneStep(),
        CleanupDownloadsStep(),
        SnapdStep(),
    ]
    steps += [SnapAppStep(app) for app in cfg.snaps]
    steps += [
        FinalUpdateStep(),
        VersionReportStep(),
    ]
    return steps


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def run(
    *,
    config_path: Optional[str] = None,
    state_path: Optional[str] = None,
    log_path: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    runner: Runner = run_cmd,
    paths: Optional[Paths] = None,
    env: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Provision the workstation, writing a run report as it goes."""

    environ = os.environ if env is None else env
    paths = paths or Paths.from_environ(require_home(environ), environ)
    state_path = state_path or str(paths.state_default)
    log_path = log_path or str(paths.log_default)

    actual_log_path = configure_logging(log_path, paths=paths)
    cfg = load_setup_config(config_path)

    state = ensure_defaults(load_state(state_path))
    exe = state["execution"]
    exe["paths"]["log_path_requested"] = log_path
    exe["paths"]["log_path_actual"] = actual_log_path
    exe["started_at"] = _now()
    exe["dry_run"] = dry_run

    ctx = RunContext(cfg=cfg, paths=paths, dry_run=dry_run, runner=runner)
    if env is not None:
        ctx.env = dict(env)
    ctx.tmp_dir = Path(tempfile.mkdtemp(prefix="workstation-setup-"))
    exe["paths"]["download_dir"] = str(ctx.tmp_dir)

    section("Starting system setup", logger)

    try:
        result = run_pipeline(
            ctx=ctx,
            steps=build_steps(cfg),
            state=state,
            start_at=start_at,
            stop_after=stop_after,
        )
        state["versions"] = dict(ctx.versions)
        exe["summary"] = {
            "installed": result.installed,
            "already_present": result.already_present,
        }
        if ctx.tmp_dir is not None:
            # The selected window skipped 75_cleanup_tmp.
            shutil.rmtree(ctx.tmp_dir)
            logger.info("Removed %s", ctx.tmp_dir)
            ctx.tmp_dir = None
        section("Setup complete!", logger)
        return state
    except PipelineAborted as e:
        logger.exception("Setup failed at step %s", e.step_id)
        if ctx.tmp_dir is not None:
            logger.info("Partial downloads left in %s", ctx.tmp_dir)
        exe["errors"].append({"step": e.step_id, "error": str(e.cause)})
        raise
    finally:
        exe["finished_at"] = _now()
        save_state(state_path, state)


def exit_code_for(exc: BaseException) -> int:
    """Map a failure to the process exit status, like `set -e` would."""

    cause = exc.cause if isinstance(exc, PipelineAborted) else exc
    if isinstance(cause, CommandError):
        return min(max(int(cause.returncode), 1), 255)
    return 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="workstation-setup",
        description="Provision a fresh Ubuntu workstation. Safe to re-run.",
    )
    p.add_argument("--config", default=None, help="YAML overrides merged over the bundled manifest")
    p.add_argument("--state", default=None, help="Path to the run report (json|yaml)")
    p.add_argument("--log", default=None, help="Path to the log file")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 35_neovim)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--list-steps", action="store_true", help="Print the step ids in order and exit")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_steps or args.start_at or args.stop_after:
        steps = build_steps(load_setup_config(args.config))
        if args.list_steps:
            for step in steps:
                print(f"{step.step_id}\t{step.title}")
            return 0
        ids = [s.step_id for s in steps]
        for flag, wanted in (("--start-at", args.start_at), ("--stop-after", args.stop_after)):
            if wanted and wanted not in ids:
                parser.error(f"{flag}: unknown step id {wanted!r} (see --list-steps)")

    try:
        run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
        )
    except KeyboardInterrupt:
        return 130
    except PipelineAborted as e:
        return exit_code_for(e)
    return 0
