from __future__ import annotations

from ..context import RunContext
from ..lib.net import run_installer_script


class StarshipStep:
    step_id = "45_starship"
    title = "Installing Starship"

    def probe(self, ctx: RunContext) -> bool:
        return ctx.command_exists("starship")

    def install(self, ctx: RunContext) -> None:
        run_installer_script(ctx, ctx.cfg.starship_installer_url, name="starship-install.sh", args=("--yes",))
