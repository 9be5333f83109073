from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.pkg import apt_install

logger = logging.getLogger(__name__)


class BasePackagesStep:
    step_id = "15_base_packages"
    title = "Installing basic dependencies"

    def probe(self, ctx: RunContext) -> bool:
        # apt itself is idempotent; always hand it the full list.
        return False

    def install(self, ctx: RunContext) -> None:
        packages = ctx.cfg.base_packages
        apt_install(ctx, packages)
        logger.info("Base packages ensured (%d)", len(packages))
