from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ..context import RunContext
from ..lib.git import git_clone, is_checkout_of

logger = logging.getLogger(__name__)

BACKUP_STAMP = "%Y%m%d%H%M%S"


def nvim_config_dir(ctx: RunContext) -> Path:
    return ctx.paths.config_dir / "nvim"


def backup_path(config_dir: Path, now: datetime) -> Path:
    return config_dir.with_name(f"{config_dir.name}.backup.{now.strftime(BACKUP_STAMP)}")


class NvimConfigBackupStep:
    """Move a foreign ~/.config/nvim aside before the editor config is cloned."""

    step_id = "50_nvim_config_backup"
    title = "Setting up Neovim configuration"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now

    def probe(self, ctx: RunContext) -> bool:
        config_dir = nvim_config_dir(ctx)
        if not config_dir.exists():
            return True
        return is_checkout_of(ctx, config_dir, ctx.cfg.config_repo("nvim"))

    def install(self, ctx: RunContext) -> None:
        config_dir = nvim_config_dir(ctx)
        target = backup_path(config_dir, self.clock())
        if target.exists():
            raise RuntimeError(f"Backup target already exists: {target}")
        logger.info("Backing up existing Neovim configuration to %s", target)
        if ctx.dry_run:
            return
        shutil.move(str(config_dir), str(target))


class NvimConfigCloneStep:
    step_id = "70_nvim_config"
    title = "Cloning Neovim configuration"

    def probe(self, ctx: RunContext) -> bool:
        return is_checkout_of(ctx, nvim_config_dir(ctx), ctx.cfg.config_repo("nvim"))

    def install(self, ctx: RunContext) -> None:
        config_dir = nvim_config_dir(ctx)
        if config_dir.exists() and not ctx.dry_run:
            # The backup step runs first; anything here now appeared mid-run.
            raise RuntimeError(f"{config_dir} exists and is not a checkout of the configured repo")
        if not ctx.dry_run:
            ctx.paths.config_dir.mkdir(parents=True, exist_ok=True)
        git_clone(ctx, ctx.cfg.config_repo("nvim"), config_dir)
