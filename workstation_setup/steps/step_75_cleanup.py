from __future__ import annotations

import logging
import shutil

from ..context import RunContext

logger = logging.getLogger(__name__)


class CleanupDownloadsStep:
    step_id = "75_cleanup_tmp"
    title = "Cleaning up downloads"

    def probe(self, ctx: RunContext) -> bool:
        return ctx.tmp_dir is None

    def install(self, ctx: RunContext) -> None:
        tmp = ctx.require_tmp_dir()
        shutil.rmtree(tmp)
        logger.info("Removed %s", tmp)
        ctx.tmp_dir = None
