from __future__ import annotations

import logging
from typing import Dict, Optional

from ..context import RunContext
from ..lib.snap import snap_info_line

logger = logging.getLogger(__name__)

NOT_INSTALLED = "Not installed"


def _first_line(ctx: RunContext, argv: list[str]) -> Optional[str]:
    if ctx.which(argv[0]) is None:
        return None
    r = ctx.run(argv, check=False, dry_run=False)
    if r.returncode != 0:
        return None
    lines = r.stdout.strip().splitlines()
    return lines[0].strip() if lines else None


def collect_versions(ctx: RunContext) -> Dict[str, str]:
    versions: Dict[str, str] = {
        "Rust": _first_line(ctx, ["rustc", "--version"]) or NOT_INSTALLED,
        "Neovim": _first_line(ctx, ["nvim", "--version"]) or NOT_INSTALLED,
        "Brave": _first_line(ctx, ["brave", "--version"]) or NOT_INSTALLED,
    }
    for app in ctx.cfg.snaps:
        if app.name == "brave":
            continue
        versions[app.label] = snap_info_line(ctx, app.name) or NOT_INSTALLED
    return versions


class VersionReportStep:
    step_id = "95_version_report"
    title = "Installed versions"

    def probe(self, ctx: RunContext) -> bool:
        return False

    def install(self, ctx: RunContext) -> None:
        logger.info("System setup completed successfully")
        logger.info("You may need to restart your system for all changes to take effect.")
        ctx.versions = collect_versions(ctx)
        for name, value in ctx.versions.items():
            logger.info("%s: %s", name, value)
