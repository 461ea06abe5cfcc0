import time
from dataclasses import dataclass, field

from ..models.units import InstallUnit, UnitKind
from .outcome import Failed, InstallOutcome, Skipped, Succeeded
from .timing import TimingEstimator


@dataclass
class PhaseProgress:
	total: int
	current: int = 0

	def advance(self) -> int:
		if self.current >= self.total:
			raise ValueError(f'Phase already at {self.current}/{self.total}')

		self.current += 1
		return self.current


@dataclass
class BatchState:
	"""
	Everything recorded during one run. Outcomes are only ever appended.
	"""

	timing: TimingEstimator = field(default_factory=TimingEstimator)
	phases: dict[UnitKind, PhaseProgress] = field(default_factory=dict)
	started_at: float = field(default_factory=time.monotonic)
	_outcomes: list[InstallOutcome] = field(default_factory=list, init=False, repr=False)
	_recorded: set[InstallUnit] = field(default_factory=set, init=False, repr=False)

	@property
	def outcomes(self) -> tuple[InstallOutcome, ...]:
		return tuple(self._outcomes)

	@property
	def succeeded(self) -> list[Succeeded]:
		return [o for o in self._outcomes if isinstance(o, Succeeded)]

	@property
	def skipped(self) -> list[Skipped]:
		return [o for o in self._outcomes if isinstance(o, Skipped)]

	@property
	def failed(self) -> list[Failed]:
		return [o for o in self._outcomes if isinstance(o, Failed)]

	def begin_phase(self, kind: UnitKind, total: int) -> PhaseProgress:
		if kind in self.phases:
			raise ValueError(f'Phase {kind.label()} has already been started')

		phase = PhaseProgress(total=total)
		self.phases[kind] = phase
		return phase

	def record(self, outcome: InstallOutcome) -> None:
		if outcome.unit in self._recorded:
			raise ValueError(f'{outcome.unit.display_name} already has an outcome')

		self._recorded.add(outcome.unit)
		self._outcomes.append(outcome)

		if isinstance(outcome, Succeeded):
			self.timing.record(outcome.elapsed)

	def has_outcome(self, unit: InstallUnit) -> bool:
		return unit in self._recorded

	def elapsed(self, now: float | None = None) -> float:
		return (now if now is not None else time.monotonic()) - self.started_at
