from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def listed_shells(shells_file: Path) -> list[str]:
    if not shells_file.exists():
        return []
    out: list[str] = []
    for line in shells_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            out.append(line)
    return out


def register_login_shell(ctx: "RunContext", shell_path: str) -> None:
    """Allow shell_path as a login shell and make it the user's shell."""

    shells_file = ctx.paths.shells_file
    if shell_path in listed_shells(shells_file):
        logger.info("%s already listed in %s", shell_path, shells_file)
    else:
        ctx.sudo(["tee", "-a", str(shells_file)], input_text=shell_path + "\n")
    # chsh prompts for the password on the terminal.
    ctx.run(["chsh", "-s", shell_path], capture=False)
