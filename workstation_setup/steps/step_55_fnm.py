from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.fnm import load_fnm_env
from ..lib.net import run_installer_script

logger = logging.getLogger(__name__)


class FnmStep:
    step_id = "55_fnm"
    title = "Installing fnm"

    def probe(self, ctx: RunContext) -> bool:
        if ctx.command_exists("fnm"):
            return True
        if (ctx.paths.fnm_dir / "fnm").exists():
            ctx.prepend_path(ctx.paths.fnm_dir)
            return True
        return False

    def install(self, ctx: RunContext) -> None:
        run_installer_script(ctx, ctx.cfg.fnm_installer_url, name="fnm-install.sh", interpreter="bash")
        load_fnm_env(ctx)

    def on_present(self, ctx: RunContext) -> None:
        # Node tooling below runs through fnm in this same session.
        load_fnm_env(ctx)
