from .step_10_refresh_index import RefreshPackageIndexStep
from .step_20_user_bin import UserBinPathStep
from .step_30_platform_tools import PlatformToolsStep
from .step_40_select_packages import SelectAndroidPackagesStep
from .step_50_base_packages import InstallBasePackagesStep
from .step_60_android_packages import InstallAndroidPackagesStep
from .step_70_legacy_python import LegacyPythonStep
from .step_80_git_identity import ConfigureGitIdentityStep
from .step_85_git_lfs import ConfigureGitLfsStep
from .step_90_cleanup import CleanupStep
from .step_99_summary import SummaryStep

__all__ = [
    "RefreshPackageIndexStep",
    "UserBinPathStep",
    "PlatformToolsStep",
    "SelectAndroidPackagesStep",
    "InstallBasePackagesStep",
    "InstallAndroidPackagesStep",
    "LegacyPythonStep",
    "ConfigureGitIdentityStep",
    "ConfigureGitLfsStep",
    "CleanupStep",
    "SummaryStep",
]
