from .batch import BatchResult, BatchRunner, Cancellation, build_runner
from .classify import FailureKind, classify, failure_hint, is_transient
from .extension import StepRunner
from .outcome import Failed, InstallOutcome, Skipped, Succeeded
from .progress import ProgressReporter
from .retry import ExecResult, RetryingExecutor, RetryPolicy
from .state import BatchState, PhaseProgress
from .summary import SummaryReporter
from .timing import TimingEstimator
from .units import ExtensionInstaller, HelperInstaller, PackageManagerInstaller, UnitInstaller

__all__ = [
	'BatchResult',
	'BatchRunner',
	'BatchState',
	'Cancellation',
	'ExecResult',
	'ExtensionInstaller',
	'Failed',
	'FailureKind',
	'HelperInstaller',
	'InstallOutcome',
	'PackageManagerInstaller',
	'PhaseProgress',
	'ProgressReporter',
	'RetryPolicy',
	'RetryingExecutor',
	'Skipped',
	'StepRunner',
	'Succeeded',
	'SummaryReporter',
	'TimingEstimator',
	'UnitInstaller',
	'build_runner',
	'classify',
	'failure_hint',
	'is_transient',
]
