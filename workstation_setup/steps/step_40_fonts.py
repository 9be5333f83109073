from __future__ import annotations

import logging
import shutil

from ..context import RunContext
from ..lib.archive import extract
from ..lib.net import download

logger = logging.getLogger(__name__)


class NerdFontStep:
    step_id = "40_fonts"
    title = "Installing Nerd Fonts"

    def probe(self, ctx: RunContext) -> bool:
        return (ctx.paths.fonts_dir / ctx.cfg.font_marker).is_file()

    def install(self, ctx: RunContext) -> None:
        tmp = ctx.require_tmp_dir()
        family = ctx.cfg.font_family
        archive = download(ctx, ctx.cfg.fonts_url, tmp / f"{family}.zip")
        unpacked = extract(ctx, archive, tmp / f"{family}Font")

        fonts_dir = ctx.paths.fonts_dir
        if ctx.dry_run:
            logger.info("Would move %s/*.ttf -> %s", unpacked, fonts_dir)
        else:
            fonts_dir.mkdir(parents=True, exist_ok=True)
            moved = 0
            for ttf in sorted(unpacked.glob("*.ttf")):
                shutil.move(str(ttf), str(fonts_dir / ttf.name))
                moved += 1
            if not (fonts_dir / ctx.cfg.font_marker).is_file():
                raise RuntimeError(f"{ctx.cfg.font_marker} not found in {archive.name}")
            logger.info("Installed %d font files into %s", moved, fonts_dir)

        ctx.run(["fc-cache", "-f"])
