from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def download(ctx: "RunContext", url: str, dest: Path) -> Path:
    """Fetch url into dest over HTTPS only.

    There is no timeout and no retry: a stalled transfer blocks the run.
    """

    dest.parent.mkdir(parents=True, exist_ok=True)
    ctx.run(
        [
            "curl",
            "--proto",
            "=https",
            "--tlsv1.2",
            "-fsSL",
            "-o",
            str(dest),
            url,
        ]
    )
    logger.info("Downloaded %s -> %s", url, dest)
    return dest


def run_installer_script(
    ctx: "RunContext",
    url: str,
    *,
    name: str,
    interpreter: str = "sh",
    args: tuple[str, ...] = (),
) -> None:
    """Download an installer script and execute it with interpreter."""

    script = download(ctx, url, ctx.require_tmp_dir() / name)
    ctx.run([interpreter, str(script), *args], capture=False)
