from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.fnm import fnm_exec, node_version_installed

logger = logging.getLogger(__name__)


class NodeStep:
    step_id = "60_node"
    title = "Installing Node"

    def probe(self, ctx: RunContext) -> bool:
        return node_version_installed(ctx, ctx.cfg.node_version)

    def install(self, ctx: RunContext) -> None:
        logger.info("Installing Node %s", ctx.cfg.node_version)
        ctx.run(["fnm", "install", ctx.cfg.node_version], capture=False)


class NodeGlobalPackageStep:
    """A package installed globally with npm under the pinned Node version."""

    def __init__(self, package: str) -> None:
        self.package = package
        self.step_id = f"65_{package}"
        self.title = f"Installing {package}"

    def probe(self, ctx: RunContext) -> bool:
        if not ctx.command_exists("fnm"):
            return False
        r = fnm_exec(ctx, ctx.cfg.node_version, [self.package, "--version"], check=False, dry_run=False)
        return r.returncode == 0

    def install(self, ctx: RunContext) -> None:
        fnm_exec(ctx, ctx.cfg.node_version, ["npm", "install", "-g", self.package], capture=False)
