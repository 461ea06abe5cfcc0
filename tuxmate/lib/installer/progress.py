import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import TextIO

from ..output import Font, logger, stylize
from .timing import TimingEstimator

BAR_WIDTH = 20
FILLED_GLYPH = '#'
EMPTY_GLYPH = '.'

_CLEAR_LINE = '\r\033[K'


@dataclass(frozen=True)
class BarSegments:
	percent: int
	filled: int
	empty: int


def bar_segments(current: int, total: int, width: int = BAR_WIDTH) -> BarSegments:
	if total <= 0:
		raise ValueError(f'Progress total must be positive, got {total}')

	percent = current * 100 // total
	filled = min(width, percent * width // 100)

	return BarSegments(percent=percent, filled=filled, empty=width - filled)


def format_eta(seconds: float) -> str:
	seconds = int(seconds)

	if seconds >= 60:
		return f'~{seconds // 60}m'
	return f'~{seconds}s'


def format_duration(seconds: float) -> str:
	seconds = int(seconds)
	return f'{seconds // 60}m {seconds % 60}s'


class ProgressReporter:
	"""
	Single line progress bar that is redrawn in place on a terminal and
	degrades to one plain line per update anywhere else. Persistent status
	lines (installed, skipped, failed) always clear the bar first.
	"""

	def __init__(
		self,
		estimator: TimingEstimator,
		stream: TextIO | None = None,
		interactive: bool | None = None,
	):
		self.estimator = estimator
		self.stream = stream or sys.stdout

		if interactive is None:
			interactive = hasattr(self.stream, 'isatty') and self.stream.isatty()

		self.interactive = interactive
		self._bar_visible = False
		self._last_render: tuple[int, int, str] | None = None

	def _style(self, text: str, fg: str | None = None, font: list[Font] = []) -> str:
		if not self.interactive:
			return text
		return stylize(text, fg, font)

	def _write(self, text: str) -> None:
		self.stream.write(text)
		self.stream.flush()

	def render(self, current: int, total: int, label: str) -> None:
		segments = bar_segments(current, total)
		eta = format_eta((total - current) * self.estimator.estimate())

		bar = self._style(FILLED_GLYPH * segments.filled, 'cyan') + EMPTY_GLYPH * segments.empty
		line = (
			f'[{bar}] {segments.percent:3d}% ({current}/{total}) '
			f'{self._style(label, font=[Font.bold])} {self._style(f"{eta} left", font=[Font.dim])}'
		)

		self._last_render = (current, total, label)

		if self.interactive:
			self._write(f'{_CLEAR_LINE}{line}')
			self._bar_visible = True
		else:
			self._write(f'{line}\n')

	def clear_line(self) -> None:
		if self.interactive and self._bar_visible:
			self._write(_CLEAR_LINE)
		self._bar_visible = False

	def _status(self, text: str) -> None:
		self.clear_line()
		self._write(f'{text}\n')

	def note(self, message: str) -> None:
		"""Prints a message without losing the progress bar currently shown."""
		redraw = self._bar_visible
		self._status(f'{self._style("!", "yellow")} {message}')
		logger.log(logging.WARNING, message)

		if redraw and self._last_render:
			self.render(*self._last_render)

	def succeeded(self, name: str, elapsed: float) -> None:
		self._status(f'{self._style("✓", "green")} {name} {self._style(f"({int(elapsed)}s)", font=[Font.dim])}')
		logger.log(logging.INFO, f'Installed {name} in {elapsed:.1f}s')

	def skipped(self, name: str) -> None:
		self._status(f'{self._style("○", font=[Font.dim])} {name} {self._style("(already installed)", font=[Font.dim])}')
		logger.log(logging.INFO, f'Skipped {name} (already installed)')

	def failed(self, name: str, hint: str | None = None, details: str | None = None) -> None:
		self._status(f'{self._style("✗", "red")} {name}')

		if hint:
			self._write(f'    {self._style(hint, font=[Font.dim])}\n')

		if details:
			for line in details.splitlines():
				self._write(f'    {line}\n')

		logger.log(logging.ERROR, f'Failed {name}' + (f': {hint}' if hint else ''))

	def checkpoint(self, message: str, now: datetime | None = None) -> None:
		time_str = (now or datetime.now()).strftime('%H:%M:%S')
		self._status(f'\n{self._style(f">>> [{time_str}] ", "cyan")}{self._style(message, "cyan", [Font.bold])}\n')
		logger.log(logging.INFO, message)
