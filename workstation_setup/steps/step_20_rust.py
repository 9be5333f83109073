from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.net import run_installer_script

logger = logging.getLogger(__name__)


class RustStep:
    step_id = "20_rust"
    title = "Installing Rust"

    def probe(self, ctx: RunContext) -> bool:
        if ctx.command_exists("rustc"):
            return True
        # rustup may have run in an earlier session without PATH being updated yet.
        if (ctx.paths.cargo_bin / "rustc").exists():
            ctx.prepend_path(ctx.paths.cargo_bin)
            return True
        return False

    def install(self, ctx: RunContext) -> None:
        run_installer_script(ctx, ctx.cfg.rust_installer_url, name="rustup-init.sh", args=("-y",))
        ctx.prepend_path(ctx.paths.cargo_bin)
        ctx.log_version(["rustc", "--version"])
        ctx.log_version(["cargo", "--version"])

    def on_present(self, ctx: RunContext) -> None:
        ctx.log_version(["rustc", "--version"])
