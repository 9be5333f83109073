from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.archive import extract
from ..lib.git import git_clone
from ..lib.net import download
from ..lib.shells import register_login_shell

logger = logging.getLogger(__name__)


class NushellStep:
    step_id = "25_nushell"
    title = "Installing Nushell"

    def probe(self, ctx: RunContext) -> bool:
        return ctx.command_exists("nu")

    def install(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        tmp = ctx.require_tmp_dir()

        # nu creates ~/.config/nushell on first start, so the config goes in first.
        config_dir = ctx.paths.config_dir / "nushell"
        if config_dir.exists():
            logger.info("Nushell config already present at %s, not cloning", config_dir)
        else:
            git_clone(ctx, cfg.config_repo("nushell"), config_dir)

        dist = cfg.nushell_dist_name
        archive = download(ctx, cfg.nushell_url, tmp / f"{dist}.tar.gz")
        extract(ctx, archive, tmp)

        target = ctx.paths.bin_dir / "nu"
        ctx.sudo(["install", "-m", "0755", str(tmp / dist / "nu"), str(target)])
        ctx.log_version([str(target), "--version"])

        if cfg.set_login_shell:
            register_login_shell(ctx, str(target))
        else:
            logger.info("Leaving login shell unchanged (features.set_login_shell=false)")
