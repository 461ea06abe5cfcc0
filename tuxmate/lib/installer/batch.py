import signal
import sys
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import TextIO

from ..general import CommandRunner, run
from ..models.catalog import Catalog
from ..models.units import InstallUnit, UnitKind
from ..output import debug, warn
from ..packages import is_installed
from ..pacman import Paru
from .progress import ProgressReporter
from .retry import RetryingExecutor, RetryPolicy
from .state import BatchState
from .summary import SummaryReporter
from .units import ExtensionInstaller, HelperInstaller, PackageManagerInstaller, UnitInstaller

PHASE_ORDER = (
	UnitKind.PACKAGE_MANAGER,
	UnitKind.HELPER,
	UnitKind.EXTENSION,
)

PHASE_TITLES = {
	UnitKind.PACKAGE_MANAGER: 'Installing system applications (pacman)',
	UnitKind.HELPER: 'Installing AUR packages (paru)',
	UnitKind.EXTENSION: 'Installing GNOME extensions',
}


class Cancellation:
	"""
	Cancellation flag set from a SIGINT handler. The batch only looks at it
	between units; a second SIGINT falls through to KeyboardInterrupt.
	"""

	def __init__(self) -> None:
		self._event = threading.Event()

	def cancel(self) -> None:
		self._event.set()

	def is_set(self) -> bool:
		return self._event.is_set()

	def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
		if self.is_set():
			signal.default_int_handler(signum, frame)

		self.cancel()

	def install_handler(self) -> None:
		signal.signal(signal.SIGINT, self._handle_signal)


@dataclass(frozen=True)
class BatchResult:
	state: BatchState
	cancelled: bool = False


class BatchRunner:
	def __init__(
		self,
		installers: dict[UnitKind, UnitInstaller],
		state: BatchState,
		reporter: ProgressReporter,
		summary: SummaryReporter,
		cancellation: Cancellation,
		helper_available: Callable[[], bool] = Paru.available,
		clock: Callable[[], float] = time.monotonic,
	):
		self.installers = installers
		self.state = state
		self.reporter = reporter
		self.summary = summary
		self.cancellation = cancellation
		self._helper_available = helper_available
		self._clock = clock

	def phases(self, catalog: Catalog) -> list[tuple[UnitKind, list[InstallUnit]]]:
		phases = []

		for kind in PHASE_ORDER:
			units = catalog.units_of(kind)

			if not units:
				continue

			if kind == UnitKind.HELPER and not self._helper_available():
				warn(f'{Paru.name} is not available, skipping {len(units)} AUR packages')
				continue

			phases.append((kind, units))

		return phases

	def run_all(self, catalog: Catalog) -> BatchResult:
		for kind, units in self.phases(catalog):
			phase = self.state.begin_phase(kind, len(units))
			installer = self.installers[kind]

			self.reporter.checkpoint(PHASE_TITLES[kind])

			for unit in units:
				if self.cancellation.is_set():
					return self.abort()

				installer.install(unit, phase)

		if self.cancellation.is_set():
			return self.abort()

		debug(f'Batch finished with {len(self.state.outcomes)} outcomes')
		return BatchResult(self.state)

	def abort(self) -> BatchResult:
		self.reporter.clear_line()
		self.reporter.stream.write('\n')
		warn('Installation cancelled by user')
		self.report()
		return BatchResult(self.state, cancelled=True)

	def report(self) -> None:
		self.summary.render(self.state, self.state.elapsed(self._clock()))


def build_runner(
	catalog: Catalog,
	*,
	runner: CommandRunner = run,
	probe: Callable[[str], bool] | None = None,
	directory_exists: Callable[[Path], bool] = Path.is_dir,
	helper_available: Callable[[], bool] = Paru.available,
	sleep: Callable[[float], None] = time.sleep,
	clock: Callable[[], float] = time.monotonic,
	policy: RetryPolicy | None = None,
	stream: TextIO | None = None,
	interactive: bool | None = None,
	cancellation: Cancellation | None = None,
) -> BatchRunner:
	"""
	Wires the default collaborators together. Every external touch point can
	be replaced, which is what the tests do.
	"""
	stream = stream or sys.stdout
	cancellation = cancellation or Cancellation()

	if probe is None:
		def probe(package: str) -> bool:
			return is_installed(package, runner)

	state = BatchState(started_at=clock())
	reporter = ProgressReporter(state.timing, stream=stream, interactive=interactive)
	executor = RetryingExecutor(
		policy,
		runner=runner,
		sleep=sleep,
		should_stop=cancellation.is_set,
		notify=reporter.note,
	)

	common = {
		'state': state,
		'reporter': reporter,
		'executor': executor,
		'clock': clock,
		'cancelled': cancellation.is_set,
	}

	installers: dict[UnitKind, UnitInstaller] = {
		UnitKind.PACKAGE_MANAGER: PackageManagerInstaller(probe=probe, **common),
		UnitKind.HELPER: HelperInstaller(probe=probe, **common),
		UnitKind.EXTENSION: ExtensionInstaller(
			extensions_dir=catalog.extensions_dir,
			directory_exists=directory_exists,
			**common,
		),
	}

	return BatchRunner(
		installers,
		state,
		reporter,
		SummaryReporter(stream=stream, interactive=reporter.interactive),
		cancellation,
		helper_available=helper_available,
		clock=clock,
	)
