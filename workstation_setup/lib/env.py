from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


@dataclass(frozen=True)
class Paths:
    home: Path
    bin_dir: Path = Path("/usr/local/bin")
    opt_dir: Path = Path("/opt")
    shells_file: Path = Path("/etc/shells")
    xdg_data_home: Optional[Path] = None

    @classmethod
    def from_environ(cls, home: Path, environ: Mapping[str, str]) -> "Paths":
        xdg = environ.get("XDG_DATA_HOME")
        return cls(home=home, xdg_data_home=Path(xdg) if xdg else None)

    @property
    def config_dir(self) -> Path:
        return self.home / ".config"

    @property
    def fonts_dir(self) -> Path:
        return self.home / ".local/share/fonts"

    @property
    def cargo_bin(self) -> Path:
        return self.home / ".cargo/bin"

    @property
    def fnm_dir(self) -> Path:
        # Same lookup order as the fnm installer script on Linux.
        legacy = self.home / ".fnm"
        if legacy.is_dir():
            return legacy
        if self.xdg_data_home is not None:
            return self.xdg_data_home / "fnm"
        return self.home / ".local/share/fnm"

    @property
    def state_dir(self) -> Path:
        return self.home / ".local/state/workstation-setup"

    @property
    def state_default(self) -> Path:
        return self.state_dir / "state.json"

    @property
    def log_default(self) -> Path:
        return self.state_dir / "setup.log"
