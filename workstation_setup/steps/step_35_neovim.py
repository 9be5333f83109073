from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.archive import extract
from ..lib.net import download

logger = logging.getLogger(__name__)


class NeovimStep:
    step_id = "35_neovim"
    title = "Installing Neovim"

    dist_name = "nvim-linux-x86_64"

    def probe(self, ctx: RunContext) -> bool:
        return ctx.command_exists("nvim")

    def install(self, ctx: RunContext) -> None:
        tmp = ctx.require_tmp_dir()
        logger.info("Downloading Neovim %s", ctx.cfg.neovim_version)
        archive = download(ctx, ctx.cfg.neovim_url, tmp / f"{self.dist_name}.tar.gz")
        extract(ctx, archive, tmp)

        install_dir = ctx.paths.opt_dir / "nvim"
        link = ctx.paths.bin_dir / "nvim"
        # A leftover /opt/nvim would make mv nest the new tree inside it.
        if install_dir.exists():
            logger.info("Replacing stale %s", install_dir)
            ctx.sudo(["rm", "-rf", str(install_dir)])
        ctx.sudo(["mv", str(tmp / self.dist_name), str(install_dir)])
        ctx.sudo(["ln", "-sf", str(install_dir / "bin" / "nvim"), str(link)])

        ctx.log_version([str(link), "--version"])

    def on_present(self, ctx: RunContext) -> None:
        ctx.log_version(["nvim", "--version"])
