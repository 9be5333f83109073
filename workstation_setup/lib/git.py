from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def _normalize_remote(url: str) -> str:
    u = url.strip().rstrip("/")
    if u.endswith(".git"):
        u = u[: -len(".git")]
    return u.lower()


def git_clone(ctx: "RunContext", url: str, dest: Path) -> None:
    ctx.run(["git", "clone", url, str(dest)], capture=False)


def origin_url(ctx: "RunContext", repo_dir: Path) -> Optional[str]:
    if not (repo_dir / ".git").exists():
        return None
    r = ctx.run(
        ["git", "-C", str(repo_dir), "remote", "get-url", "origin"],
        check=False,
        dry_run=False,
    )
    if r.returncode != 0:
        return None
    return r.stdout.strip() or None


def is_checkout_of(ctx: "RunContext", repo_dir: Path, url: str) -> bool:
    """True if repo_dir is a git checkout whose origin is url."""
    current = origin_url(ctx, repo_dir)
    return current is not None and _normalize_remote(current) == _normalize_remote(url)
