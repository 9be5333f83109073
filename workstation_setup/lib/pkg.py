from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def apt_update(ctx: "RunContext") -> None:
    ctx.sudo(["apt", "update"], capture=False)


def apt_upgrade(ctx: "RunContext") -> None:
    ctx.sudo(["apt", "upgrade", "-y"], capture=False)


def apt_install(ctx: "RunContext", packages: Sequence[str]) -> None:
    if not packages:
        return
    ctx.sudo(["apt", "install", "-y", *packages], capture=False)

