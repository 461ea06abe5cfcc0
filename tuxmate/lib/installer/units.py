import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import override

from ..models.units import InstallUnit, UnitKind
from ..output import debug
from ..packages import is_installed
from ..pacman import Pacman, Paru
from .classify import classify, failure_hint
from .extension import StepRunner
from .outcome import Failed, InstallOutcome, Skipped, Succeeded
from .progress import ProgressReporter
from .retry import RetryingExecutor
from .state import BatchState, PhaseProgress

_DETAIL_LINES = 10


class UnitInstaller(ABC):
	"""
	Drives a single unit through probe, execute and record.

	All mutation of the system happens inside the executed command; the
	installer itself only reads state and reports.
	"""

	kind: UnitKind

	def __init__(
		self,
		state: BatchState,
		reporter: ProgressReporter,
		executor: RetryingExecutor,
		probe: Callable[[str], bool] = is_installed,
		clock: Callable[[], float] = time.monotonic,
		cancelled: Callable[[], bool] = lambda: False,
	):
		self.state = state
		self.reporter = reporter
		self.executor = executor
		self._probe = probe
		self._clock = clock
		self._cancelled = cancelled

	def is_present(self, unit: InstallUnit) -> bool:
		return self._probe(unit.identifier)

	@abstractmethod
	def execute(self, unit: InstallUnit) -> tuple[bool, str, str | None]:
		"""Returns (ok, captured output, description of the failing step)."""

	def failure_details(self, output: str, step: str | None) -> str | None:
		return None

	def install(self, unit: InstallUnit, phase: PhaseProgress) -> InstallOutcome | None:
		"""
		Installs ``unit`` unless it is already present and records the outcome.

		Returns None when the unit failed because the run was cancelled while
		its command was executing; such a unit gets no outcome.
		"""
		if unit.kind != self.kind:
			raise ValueError(f'{type(self).__name__} cannot install {unit.kind.label()} unit {unit.display_name}')

		position = phase.advance()

		if self.is_present(unit):
			skipped = Skipped(unit)
			self.reporter.skipped(unit.display_name)
			self.state.record(skipped)
			return skipped

		self.reporter.render(position, phase.total, unit.display_name)
		start = self._clock()

		ok, output, step = self.execute(unit)

		if ok:
			succeeded = Succeeded(unit, elapsed=self._clock() - start)
			self.state.record(succeeded)
			self.reporter.succeeded(unit.display_name, succeeded.elapsed)
			return succeeded

		if self._cancelled():
			self.reporter.clear_line()
			debug(f'{unit.display_name} was interrupted, not recording an outcome')
			return None

		reason = classify(output, self.kind)
		failed = Failed(unit, reason=reason, output=output, step=step)

		self.reporter.failed(
			unit.display_name,
			hint=failure_hint(reason, self.kind),
			details=self.failure_details(output, step),
		)
		self.state.record(failed)
		return failed


class PackageManagerInstaller(UnitInstaller):
	kind = UnitKind.PACKAGE_MANAGER

	@override
	def execute(self, unit: InstallUnit) -> tuple[bool, str, str | None]:
		result = self.executor.execute(Pacman.install_argv(unit.identifier))
		return result.ok, result.output, None


class HelperInstaller(UnitInstaller):
	kind = UnitKind.HELPER

	@override
	def execute(self, unit: InstallUnit) -> tuple[bool, str, str | None]:
		result = self.executor.execute(Paru.install_argv(unit.identifier))
		return result.ok, result.output, None


class ExtensionInstaller(UnitInstaller):
	"""
	Extensions are not tracked by the package database: presence means the
	extension directory named after the extension uuid exists.
	"""

	kind = UnitKind.EXTENSION

	def __init__(
		self,
		state: BatchState,
		reporter: ProgressReporter,
		executor: RetryingExecutor,
		extensions_dir: Path,
		directory_exists: Callable[[Path], bool] = Path.is_dir,
		clock: Callable[[], float] = time.monotonic,
		cancelled: Callable[[], bool] = lambda: False,
	):
		self.steps = StepRunner(executor, extensions_dir)

		super().__init__(
			state,
			reporter,
			executor,
			probe=lambda uuid: directory_exists(extensions_dir / uuid),
			clock=clock,
			cancelled=cancelled,
		)

	@override
	def execute(self, unit: InstallUnit) -> tuple[bool, str, str | None]:
		result = self.steps.run(unit)
		step = result.failed_step.describe() if result.failed_step else None
		return result.ok, result.output, step

	@override
	def failure_details(self, output: str, step: str | None) -> str | None:
		lines = [line for line in output.splitlines() if line.strip()][-_DETAIL_LINES:]

		if step:
			lines.insert(0, f'Failed step: {step}')

		return '\n'.join(lines) or None
