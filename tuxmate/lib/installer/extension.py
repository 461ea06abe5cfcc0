import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum, auto
from pathlib import Path

from ..general import format_cmd
from ..models.units import ExtensionRecipe, InstallUnit
from ..output import debug
from .retry import RetryingExecutor


class StepAction(StrEnum):
	CLONE = auto()
	BUILD = auto()
	INSTALL = auto()


@dataclass(frozen=True)
class RecipeStep:
	action: StepAction
	argv: tuple[str, ...] = ()
	in_checkout: bool = True

	def describe(self) -> str:
		match self.action:
			case StepAction.CLONE:
				return f'clone {self.argv[-2]}'
			case StepAction.BUILD:
				return f'build: {format_cmd(self.argv)}'
			case StepAction.INSTALL:
				return 'install into extensions directory'


@dataclass(frozen=True)
class RecipeResult:
	ok: bool
	output: str
	failed_step: RecipeStep | None = None


def recipe_steps(recipe: ExtensionRecipe, checkout: Path) -> list[RecipeStep]:
	steps = [
		RecipeStep(
			StepAction.CLONE,
			('git', 'clone', '--depth', '1', recipe.repository, str(checkout)),
			in_checkout=False,
		)
	]

	for argv in recipe.build:
		steps.append(RecipeStep(StepAction.BUILD, tuple(argv)))

	if recipe.move_into_place:
		steps.append(RecipeStep(StepAction.INSTALL))

	return steps


class StepRunner:
	"""
	Interprets an extension recipe step by step inside a throw-away work
	directory, so a failure can be pinned on the step that caused it.
	"""

	def __init__(
		self,
		executor: RetryingExecutor,
		extensions_dir: Path,
		make_workdir: Callable[[], str] = lambda: tempfile.mkdtemp(prefix='tuxmate-ext-'),
	):
		self.executor = executor
		self.extensions_dir = extensions_dir
		self._make_workdir = make_workdir

	def destination(self, unit: InstallUnit) -> Path:
		return self.extensions_dir / unit.identifier

	def _install(self, unit: InstallUnit, checkout: Path) -> tuple[bool, str]:
		dest = self.destination(unit)

		try:
			dest.parent.mkdir(parents=True, exist_ok=True)
			if dest.exists():
				shutil.rmtree(dest)
			shutil.move(checkout, dest)
		except OSError as err:
			return False, f'Could not move {checkout} to {dest}: {err}'

		return True, f'Installed {unit.identifier} into {dest}'

	def run(self, unit: InstallUnit) -> RecipeResult:
		if unit.recipe is None:
			raise ValueError(f'{unit.display_name} has no recipe')

		workdir = Path(self._make_workdir())
		checkout = workdir / unit.identifier
		outputs: list[str] = []

		try:
			for step in recipe_steps(unit.recipe, checkout):
				debug(f'{unit.display_name}: {step.describe()}')

				if step.action == StepAction.INSTALL:
					ok, output = self._install(unit, checkout)
				else:
					result = self.executor.execute(step.argv, cwd=checkout if step.in_checkout else workdir)
					ok, output = result.ok, result.output

				outputs.append(output)

				if not ok:
					return RecipeResult(False, '\n'.join(outputs), failed_step=step)
		finally:
			shutil.rmtree(workdir, ignore_errors=True)

		return RecipeResult(True, '\n'.join(outputs))
