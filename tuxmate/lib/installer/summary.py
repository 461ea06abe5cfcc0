import logging
import sys
from typing import TextIO

from ..output import Font, logger, stylize
from .progress import format_duration
from .state import BatchState

RULE = '─' * 77


class SummaryReporter:
	def __init__(self, stream: TextIO | None = None, interactive: bool | None = None):
		self.stream = stream or sys.stdout

		if interactive is None:
			interactive = hasattr(self.stream, 'isatty') and self.stream.isatty()

		self.interactive = interactive

	def _style(self, text: str, fg: str | None = None, font: list[Font] = []) -> str:
		if not self.interactive:
			return text
		return stylize(text, fg, font)

	def lines(self, state: BatchState, elapsed: float) -> list[str]:
		installed = len(state.succeeded)
		skipped = len(state.skipped)
		failed = state.failed
		duration = self._style(f'({format_duration(elapsed)})', font=[Font.dim])

		lines = ['', RULE]

		if not failed:
			if skipped:
				lines.append(f'{self._style("✓", "green")} Done! {installed} installed, {skipped} already installed {duration}')
			else:
				lines.append(f'{self._style("✓", "green")} All {installed} packages installed! {duration}')
		else:
			lines.append(f'{self._style("!", "yellow")} {installed} installed, {skipped} skipped, {len(failed)} failed {duration}')
			lines.append('')
			lines.append(self._style('Failed:', 'red'))

			for outcome in failed:
				lines.append(f'  • {outcome.unit.display_name}')

		lines.append(RULE)
		return lines

	def render(self, state: BatchState, elapsed: float) -> None:
		self.stream.write('\n'.join(self.lines(state, elapsed)) + '\n')
		self.stream.flush()

		logger.log(
			logging.INFO,
			f'Summary: {len(state.succeeded)} installed, {len(state.skipped)} skipped, '
			f'{len(state.failed)} failed in {format_duration(elapsed)}',
		)

		for outcome in state.failed:
			logger.log(logging.DEBUG, f'{outcome.unit.display_name} failed ({outcome.reason}):\n{outcome.output}')
