from .step_10_system_update import FinalUpdateStep, SystemUpdateStep
from .step_15_base_packages import BasePackagesStep
from .step_20_rust import RustStep
from .step_25_nushell import NushellStep
from .step_30_tmux_config import TmuxConfigStep
from .step_35_neovim import NeovimStep
from .step_40_fonts import NerdFontStep
from .step_45_starship import StarshipStep
from .step_50_nvim_config import NvimConfigBackupStep, NvimConfigCloneStep
from .step_55_fnm import FnmStep
from .step_60_node import NodeGlobalPackageStep, NodeStep
from .step_75_cleanup import CleanupDownloadsStep
from .step_80_snaps import SnapAppStep, SnapdStep
from .step_95_version_report import VersionReportStep

__all__ = [
    "SystemUpdateStep",
    "BasePackagesStep",
    "RustStep",
    "NushellStep",
    "TmuxConfigStep",
    "NeovimStep",
    "NerdFontStep",
    "StarshipStep",
    "NvimConfigBackupStep",
    "FnmStep",
    "NodeStep",
    "NodeGlobalPackageStep",
    "NvimConfigCloneStep",
    "CleanupDownloadsStep",
    "SnapdStep",
    "SnapAppStep",
    "FinalUpdateStep",
    "VersionReportStep",
]
