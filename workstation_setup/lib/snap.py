from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def snap_installed(ctx: "RunContext", name: str) -> bool:
    """Ask snapd about one named snap.

    `snap list <name>` exits non-zero when the snap is not installed, so
    there is no substring matching against the whole listing.
    """
    r = ctx.run(["snap", "list", name], check=False, dry_run=False)
    return r.returncode == 0


def snap_install(ctx: "RunContext", name: str, *, classic: bool = False) -> None:
    argv = ["snap", "install", name]
    if classic:
        argv.append("--classic")
    ctx.sudo(argv, capture=False)


def snap_info_line(ctx: "RunContext", name: str) -> Optional[str]:
    """Return the `snap list` row for name, or None when it is not installed."""
    r = ctx.run(["snap", "list", name], check=False, dry_run=False)
    if r.returncode != 0:
        return None
    for line in r.stdout.splitlines()[1:]:
        fields = line.split()
        if fields and fields[0] == name:
            return line.strip()
    return None
