from __future__ import annotations

from ..context import RunContext
from ..lib.git import git_clone


class TmuxConfigStep:
    step_id = "30_tmux_config"
    title = "Installing tmux config"

    def probe(self, ctx: RunContext) -> bool:
        return (ctx.paths.config_dir / "tmux").is_dir()

    def install(self, ctx: RunContext) -> None:
        git_clone(ctx, ctx.cfg.config_repo("tmux"), ctx.paths.config_dir / "tmux")
