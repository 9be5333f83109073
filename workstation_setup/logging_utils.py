from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from .lib.env import Paths

BANNER = "====="
FALLBACK_NAME = "workstation-setup.log"

FILE_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
# The terminal gets the banners and messages only; timestamps live in the file.
CONSOLE_FORMAT = logging.Formatter(fmt="%(message)s")


def log_candidates(log_path: Optional[str], paths: Optional[Paths]) -> List[Path]:
    """Locations to try for the log file, best first."""

    out: List[Path] = []
    if log_path:
        out.append(Path(log_path))
    if paths is not None and paths.log_default not in out:
        out.append(paths.log_default)
    out.append(Path.cwd() / FALLBACK_NAME)
    return out


def _open_first(candidates: List[Path]) -> logging.FileHandler:
    last: Optional[OSError] = None
    for candidate in candidates:
        try:
            candidate.parent.mkdir(parents=True, exist_ok=True)
            return logging.FileHandler(candidate, encoding="utf-8")
        except OSError as e:
            last = e
    assert last is not None
    raise last


def _drop_own_handlers(root: logging.Logger) -> None:
    for h in list(root.handlers):
        if getattr(h, "_workstation_handler", False):
            root.removeHandler(h)
            h.close()


def configure_logging(
    log_path: Optional[str] = None,
    *,
    paths: Optional[Paths] = None,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send this run's log to a file and, unless disabled, to the terminal.

    The file is the requested path, else the per-user default under the
    state dir, else ``workstation-setup.log`` in the current directory;
    the first one that can be opened wins. Calling this again replaces the
    handlers from the previous call, so each run gets its own file.

    Returns the actual file path being used.
    """

    root = logging.getLogger()
    root.setLevel(level)
    _drop_own_handlers(root)

    file_handler = _open_first(log_candidates(log_path, paths))
    file_handler.setFormatter(FILE_FORMAT)
    handlers: List[logging.Handler] = [file_handler]

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(CONSOLE_FORMAT)
        handlers.append(console)

    for h in handlers:
        setattr(h, "_workstation_handler", True)
        root.addHandler(h)

    chosen = file_handler.baseFilename
    if log_path and chosen != os.path.abspath(log_path):
        logging.getLogger(__name__).warning("Cannot write %s, logging to %s", log_path, chosen)
    else:
        logging.getLogger(__name__).debug("Logging to %s", chosen)
    return chosen


def section(title: str, logger: Optional[logging.Logger] = None) -> None:
    (logger or logging.getLogger(__name__)).info("%s %s %s", BANNER, title, BANNER)
