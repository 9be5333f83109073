from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def extract(ctx: "RunContext", archive: Path, dest: Path) -> Path:
    """Extract a .tar.gz/.tgz or .zip archive into dest."""

    name = archive.name.lower()
    dest.mkdir(parents=True, exist_ok=True)
    if name.endswith((".tar.gz", ".tgz")):
        ctx.run(["tar", "-xzf", str(archive), "-C", str(dest)])
    elif name.endswith(".zip"):
        ctx.run(["unzip", "-o", "-q", str(archive), "-d", str(dest)])
    else:
        raise ValueError(f"Unsupported archive format: {archive}")
    logger.info("Extracted %s -> %s", archive, dest)
    return dest
