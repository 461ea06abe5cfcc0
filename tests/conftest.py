import subprocess
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest

from tuxmate.lib.output import logger


class ScriptedRunner:
	"""
	Stands in for tuxmate.lib.general.run. Results are scripted per substring
	of the command line; the last scripted result for a match repeats.
	"""

	def __init__(self, default: tuple[int, str] = (0, '')) -> None:
		self.calls: list[tuple[tuple[str, ...], Path | None]] = []
		self._scripts: list[tuple[str, list[tuple[int, str]]]] = []
		self._default = default

	def script(self, match: str, *results: tuple[int, str]) -> 'ScriptedRunner':
		self._scripts.append((match, list(results)))
		return self

	def commands(self) -> list[tuple[str, ...]]:
		return [argv for argv, _ in self.calls]

	def __call__(self, argv: Sequence[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
		cmd = tuple(argv)
		self.calls.append((cmd, cwd))
		joined = ' '.join(cmd)

		for match, results in self._scripts:
			if match in joined and results:
				code, output = results.pop(0) if len(results) > 1 else results[0]
				return subprocess.CompletedProcess(list(cmd), code, output)

		code, output = self._default
		return subprocess.CompletedProcess(list(cmd), code, output)


class FakeClock:
	def __init__(self, start: float = 1000.0) -> None:
		self.now = start

	def advance(self, seconds: float) -> None:
		self.now += seconds

	def __call__(self) -> float:
		return self.now


class FakeSystem:
	"""
	Runner that also tracks what got installed, so probes reflect earlier
	installs like the real package database would. A successful `git clone`
	leaves a checkout with a metadata.json behind.
	"""

	def __init__(self, scripted: ScriptedRunner, clock: FakeClock, installed: set[str] | None = None) -> None:
		self.scripted = scripted
		self.clock = clock
		self.installed = installed if installed is not None else set()
		self.on_install: Callable[[str], None] | None = None

	def probe(self, package: str) -> bool:
		return package in self.installed

	def __call__(self, argv: Sequence[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
		cmd = list(argv)
		result = self.scripted(cmd, cwd)
		self.clock.advance(10)

		if result.returncode != 0:
			return result

		if cmd[:2] == ['git', 'clone']:
			checkout = Path(cmd[-1])
			checkout.mkdir(parents=True)
			(checkout / 'metadata.json').write_text('{}')
		elif '-S' in cmd:
			self.installed.add(cmd[-1])

			if self.on_install:
				self.on_install(cmd[-1])

		return result


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path: Path) -> Iterator[Path]:
	log_dir = tmp_path / 'logs'
	previous = logger.directory
	logger.set_directory(log_dir)
	logger.verbose = False
	yield log_dir
	logger.set_directory(previous)


@pytest.fixture
def scripted_runner() -> type[ScriptedRunner]:
	return ScriptedRunner


@pytest.fixture
def fake_clock() -> FakeClock:
	return FakeClock()


@pytest.fixture
def sleeps() -> list[float]:
	return []


@pytest.fixture(scope='session')
def catalog_fixture() -> Path:
	return Path(__file__).parent / 'data' / 'test_catalog.json'


@pytest.fixture(scope='session')
def pacman_info_fixture() -> Path:
	return Path(__file__).parent / 'data' / 'pacman_qi_vlc.txt'


@pytest.fixture
def fake_system() -> type[FakeSystem]:
	return FakeSystem
