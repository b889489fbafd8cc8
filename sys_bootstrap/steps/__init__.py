from .step_00_self_update import SelfUpdateStep
from .step_05_apt_update import AptUpdateStep
from .step_06_snap_update import SnapUpdateStep
from .step_10_reboot_required import RebootRequiredStep
from .step_12_root_password import RootPasswordStep
from .step_20_base_tools import BaseToolsStep
from .step_25_downloaded_debs import DownloadedDebsStep
from .step_30_shell import ShellStep
from .step_32_git_config import GitConfigStep
from .step_34_dotfiles import DotfilesStep
from .step_40_desktop import DesktopStep
from .step_50_docker import DockerStep
from .step_55_docker_compose import DockerComposeStep
from .step_58_nvidia_docker import NvidiaDockerStep
from .step_60_cli_utils import CliUtilsStep
from .step_70_drivers import DriversStep
from .step_80_power import PowerStep

__all__ = [
    "SelfUpdateStep",
    "AptUpdateStep",
    "SnapUpdateStep",
    "RebootRequiredStep",
    "RootPasswordStep",
    "BaseToolsStep",
    "DownloadedDebsStep",
    "ShellStep",
    "GitConfigStep",
    "DotfilesStep",
    "DesktopStep",
    "DockerStep",
    "DockerComposeStep",
    "NvidiaDockerStep",
    "CliUtilsStep",
    "DriversStep",
    "PowerStep",
]
