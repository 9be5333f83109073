from __future__ import annotations

import logging

from ..config import SnapApp
from ..context import RunContext
from ..lib.pkg import apt_install
from ..lib.snap import snap_install, snap_installed

logger = logging.getLogger(__name__)


class SnapdStep:
    step_id = "80_snapd"
    title = "Installing Snap packages"

    def probe(self, ctx: RunContext) -> bool:
        return ctx.command_exists("snap")

    def install(self, ctx: RunContext) -> None:
        apt_install(ctx, ["snapd"])
        ctx.sudo(["systemctl", "enable", "--now", "snapd.socket"], capture=False)


class SnapAppStep:
    def __init__(self, app: SnapApp) -> None:
        self.app = app
        self.step_id = f"81_snap_{app.name}"
        self.title = f"Installing {app.label}"

    def probe(self, ctx: RunContext) -> bool:
        return snap_installed(ctx, self.app.name)

    def install(self, ctx: RunContext) -> None:
        snap_install(ctx, self.app.name, classic=self.app.classic)
        if self.app.name == "alacritty" and ctx.cfg.alacritty_default_terminal:
            ctx.run(
                [
                    "gsettings",
                    "set",
                    "org.gnome.desktop.default-applications.terminal",
                    "exec",
                    "alacritty",
                ]
            )
