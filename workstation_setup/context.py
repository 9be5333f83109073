from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

from .config import SetupConfig
from .lib.command import CmdResult, run_cmd
from .lib.env import Paths

logger = logging.getLogger(__name__)

Runner = Callable[..., CmdResult]


@dataclass
class RunContext:
    """Everything a step needs for one provisioning run.

    ``env`` is the session environment. Steps extend it (cargo bin dir, fnm
    env) so that later steps find freshly installed tools, the same way a
    shell session would after sourcing an env file.
    """

    cfg: SetupConfig
    paths: Paths
    env: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    dry_run: bool = False
    runner: Runner = run_cmd
    tmp_dir: Optional[Path] = None
    versions: Dict[str, Any] = field(default_factory=dict)

    def run(self, argv: Sequence[str], **kwargs: Any) -> CmdResult:
        kwargs.setdefault("env", self.env)
        kwargs.setdefault("dry_run", self.dry_run)
        return self.runner(argv, **kwargs)

    def log_version(self, argv: Sequence[str]) -> Optional[str]:
        """Run a version command and log its first line."""
        r = self.run(argv)
        lines = r.stdout.strip().splitlines()
        first = lines[0].strip() if lines else None
        if first:
            logger.info("%s", first)
        return first

    def sudo(self, argv: Sequence[str], **kwargs: Any) -> CmdResult:
        return self.run(["sudo", *argv], **kwargs)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name, path=self.env.get("PATH", ""))

    def command_exists(self, name: str) -> bool:
        return self.which(name) is not None

    def prepend_path(self, directory: Path | str) -> None:
        d = str(directory)
        parts = [p for p in self.env.get("PATH", "").split(os.pathsep) if p]
        if d in parts:
            return
        self.env["PATH"] = os.pathsep.join([d, *parts])

    def require_tmp_dir(self) -> Path:
        if self.tmp_dir is None:
            raise RuntimeError("download directory not initialized")
        return self.tmp_dir
