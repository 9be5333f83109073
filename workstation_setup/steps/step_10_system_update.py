from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.pkg import apt_update, apt_upgrade

logger = logging.getLogger(__name__)


class SystemUpdateStep:
    step_id = "10_system_update"
    title = "Updating system packages"

    def probe(self, ctx: RunContext) -> bool:
        return False

    def install(self, ctx: RunContext) -> None:
        apt_update(ctx)
        apt_upgrade(ctx)


class FinalUpdateStep(SystemUpdateStep):
    step_id = "90_final_update"
    title = "Final system update"
