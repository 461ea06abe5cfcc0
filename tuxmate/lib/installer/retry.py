import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import RequirementError
from ..general import CommandRunner, clear_vt100_escape_codes_from_str, format_cmd, run
from ..output import debug, warn
from .classify import TRANSIENT_MARKERS, is_transient


@dataclass(frozen=True)
class RetryPolicy:
	max_attempts: int = 3
	initial_delay: float = 5.0
	backoff_factor: float = 2.0
	transient_markers: tuple[str, ...] = TRANSIENT_MARKERS

	def delays(self) -> list[float]:
		"""Sleeps taken between attempts when every attempt fails transiently."""
		delay = self.initial_delay
		result = []

		for _ in range(self.max_attempts - 1):
			result.append(delay)
			delay *= self.backoff_factor

		return result


@dataclass(frozen=True)
class ExecResult:
	argv: tuple[str, ...]
	ok: bool
	output: str
	attempts: int
	returncode: int | None = None


@dataclass
class RetryState:
	attempt: int
	delay: float
	output: str = ''


class RetryingExecutor:
	"""
	Runs an external command, retrying only failures whose output looks like
	a network problem. Everything else fails on the first attempt.
	"""

	def __init__(
		self,
		policy: RetryPolicy | None = None,
		runner: CommandRunner = run,
		sleep: Callable[[float], None] = time.sleep,
		should_stop: Callable[[], bool] | None = None,
		notify: Callable[[str], None] = warn,
	):
		self.policy = policy or RetryPolicy()
		self._runner = runner
		self._sleep = sleep
		self._should_stop = should_stop or (lambda: False)
		self.notify = notify

	def _attempt(self, argv: Sequence[str], cwd: Path | None) -> tuple[bool, str, int | None]:
		try:
			result = self._runner(argv, cwd)
		except (OSError, RequirementError) as err:
			return False, f'{argv[0]}: {err}', None

		return result.returncode == 0, clear_vt100_escape_codes_from_str(result.stdout or ''), result.returncode

	def execute_once(self, argv: Sequence[str], cwd: Path | None = None) -> ExecResult:
		ok, output, returncode = self._attempt(argv, cwd)

		if not ok:
			debug(f'{format_cmd(argv)} failed:\n{output}')

		return ExecResult(tuple(argv), ok, output, 1, returncode)

	def execute(self, argv: Sequence[str], cwd: Path | None = None) -> ExecResult:
		state = RetryState(attempt=1, delay=self.policy.initial_delay)

		while True:
			ok, state.output, returncode = self._attempt(argv, cwd)

			if ok:
				return ExecResult(tuple(argv), True, state.output, state.attempt, returncode)

			debug(f'{format_cmd(argv)} failed on attempt {state.attempt}/{self.policy.max_attempts}:\n{state.output}')

			if (
				not is_transient(state.output, self.policy.transient_markers)
				or state.attempt >= self.policy.max_attempts
				or self._should_stop()
			):
				return ExecResult(tuple(argv), False, state.output, state.attempt, returncode)

			self.notify(f'Network error, retrying in {state.delay:g}s... (attempt {state.attempt}/{self.policy.max_attempts})')
			self._sleep(state.delay)

			state.delay *= self.policy.backoff_factor
			state.attempt += 1
