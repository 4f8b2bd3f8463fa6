from .step_20_install_rust import InstallRustStep
from .step_30_build_deps import InstallBuildDepsStep
from .step_40_install_monitoring import InstallMonitoringStep
from .step_50_install_risczero import InstallRiscZeroStep
from .step_60_install_bento_cli import InstallBentoCliStep
from .step_70_clone_boundless import CloneBoundlessStep
from .step_80_install_drivers import InstallDriversStep
from .step_90_reboot import RebootStep
from .step_110_stack_up import StackUpStep
from .step_120_run_benchmark import RunBenchmarkStep

__all__ = [
    "InstallRustStep",
    "InstallBuildDepsStep",
    "InstallMonitoringStep",
    "InstallRiscZeroStep",
    "InstallBentoCliStep",
    "CloneBoundlessStep",
    "InstallDriversStep",
    "RebootStep",
    "StackUpStep",
    "RunBenchmarkStep",
]
