import functools
import importlib
import io
import json
import os
from pathlib import Path

import pytest
from pytest import MonkeyPatch

from tuxmate.lib.exceptions import HelperBootstrapError
from tuxmate.lib.installer import Cancellation, RetryingExecutor, build_runner
from tuxmate.lib.pacman import Pacman, Paru

tuxmate_main = importlib.import_module('tuxmate.main')
wait_for_lock = Pacman.wait_for_lock


@pytest.fixture
def catalog_file(catalog_fixture: Path, tmp_path: Path) -> Path:
	data = json.loads(catalog_fixture.read_text())
	data['extensions_dir'] = str(tmp_path / 'extensions')
	data['desktop'][0]['path'] = str(tmp_path / 'pam_environment')

	path = tmp_path / 'catalog.json'
	path.write_text(json.dumps(data))
	return path


class Session:
	"""Replaces every touch point of run() with the outside world."""

	def __init__(self, monkeypatch: MonkeyPatch, system, sleeps: list[float]) -> None:
		self.system = system
		self.runner = system
		self.batch = None
		self.cancellation: Cancellation | None = None
		self.helper_available = True

		monkeypatch.setattr(os, 'geteuid', lambda: 1000)
		monkeypatch.setattr(Pacman, 'wait_for_lock', lambda should_stop: 0)
		monkeypatch.setattr(Paru, 'available', lambda: True)
		monkeypatch.setattr(Cancellation, 'install_handler', lambda self: None)
		monkeypatch.setattr(
			tuxmate_main,
			'RetryingExecutor',
			functools.partial(RetryingExecutor, runner=self._run, sleep=sleeps.append),
		)
		monkeypatch.setattr(tuxmate_main, 'build_runner', self._build_runner)

	def _run(self, argv, cwd=None):
		return self.runner(argv, cwd)

	def _build_runner(self, catalog, cancellation):
		self.cancellation = cancellation
		self.batch = build_runner(
			catalog,
			runner=self._run,
			probe=self.system.probe,
			sleep=lambda _: None,
			clock=self.system.clock,
			helper_available=lambda: self.helper_available,
			stream=io.StringIO(),
			interactive=False,
			cancellation=cancellation,
		)
		return self.batch

	@property
	def output(self) -> str:
		return self.batch.reporter.stream.getvalue()


@pytest.fixture
def session(monkeypatch: MonkeyPatch, scripted_runner, fake_system, fake_clock, sleeps) -> Session:
	return Session(monkeypatch, fake_system(scripted_runner(), fake_clock), sleeps)


def test_refuses_to_run_as_root(monkeypatch: MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
	monkeypatch.setattr(os, 'geteuid', lambda: 0)

	assert tuxmate_main.main([]) == 1
	assert 'Run as regular user, not root.' in capsys.readouterr().err


def test_invalid_catalog(session: Session, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	assert tuxmate_main.main(['--catalog', str(tmp_path / 'missing.json')]) == 1
	assert 'does not exist' in capsys.readouterr().err
	assert session.batch is None


def test_full_run(session: Session, catalog_file: Path, tmp_path: Path) -> None:
	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 0

	commands = session.system.scripted.commands()
	assert commands[0] == ('sudo', 'pacman', '-Sy', '--noconfirm')
	assert commands[-1] == ('fc-cache', '-f')

	assert 'All 6 packages installed!' in session.output
	assert '>>> [' in session.output
	assert 'Final configuration' in session.output
	assert (tmp_path / 'pam_environment').read_text() == 'GTK_IM_MODULE=fcitx\n'
	assert (tmp_path / 'extensions' / 'weekly-commits@funinkina.is-a.dev').is_dir()


def test_rerun_installs_nothing(session: Session, catalog_file: Path) -> None:
	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 0
	first = len(session.system.scripted.calls)

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 0

	second = session.system.scripted.commands()[first:]
	assert second == [('sudo', 'pacman', '-Sy', '--noconfirm'), ('fc-cache', '-f')]
	assert 'Done! 0 installed, 6 already installed' in session.output


def test_failures_still_exit_zero(session: Session, catalog_file: Path) -> None:
	session.system.scripted.script('localsend-bin', (1, 'error: target not found: localsend-bin'))

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 0
	assert '! 5 installed, 0 skipped, 1 failed' in session.output
	assert '  • LocalSend' in session.output


def test_sync_failure_is_not_fatal(session: Session, catalog_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
	session.system.scripted.script('-Sy', (1, 'error: failed to synchronize all databases'))

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 0
	assert 'Sync failed, continuing...' in capsys.readouterr().out


def test_helper_bootstrap_failure(monkeypatch: MonkeyPatch, session: Session, catalog_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
	def bootstrap() -> None:
		raise HelperBootstrapError('paru installation failed')

	monkeypatch.setattr(Paru, 'available', lambda: False)
	monkeypatch.setattr(Paru, 'bootstrap', bootstrap)

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 1
	assert 'paru installation failed' in capsys.readouterr().err
	assert session.system.installed == set()


def test_cancelled_during_sync(session: Session, catalog_file: Path) -> None:
	def cancel_on_sync(argv, cwd=None):
		if '-Sy' in argv:
			session.cancellation.cancel()
		return session.system(argv, cwd)

	session.runner = cancel_on_sync

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 130
	assert session.system.installed == set()
	assert 'All 0 packages installed!' in session.output


def test_cancelled_while_waiting_for_lock(monkeypatch: MonkeyPatch, session: Session, catalog_file: Path, tmp_path: Path) -> None:
	lock = tmp_path / 'db.lck'
	lock.touch()

	def sleep(seconds: float) -> None:
		session.cancellation.cancel()

	monkeypatch.setattr(
		Pacman,
		'wait_for_lock',
		lambda should_stop: wait_for_lock(lock, sleep=sleep, should_stop=should_stop),
	)

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 130
	assert ('sudo', 'pacman', '-Sy', '--noconfirm') not in session.system.scripted.commands()
	assert lock.exists()
	assert 'All 0 packages installed!' in session.output


def test_cancelled_during_batch(session: Session, catalog_file: Path) -> None:
	def cancel_after_vlc(package: str) -> None:
		if package == 'vlc':
			session.cancellation.cancel()

	session.system.on_install = cancel_after_vlc

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 130
	assert session.system.installed == {'vlc'}
	assert ('fc-cache', '-f') not in session.system.scripted.commands()
	assert not (Path(catalog_file).parent / 'pam_environment').exists()


def test_second_interrupt_aborts(session: Session, catalog_file: Path) -> None:
	def interrupt_on_mpv(argv, cwd=None):
		if 'mpv' in argv:
			raise KeyboardInterrupt
		return session.system(argv, cwd)

	session.runner = interrupt_on_mpv

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 130
	assert session.system.installed == {'vlc'}
	assert 'Done! 1 installed' not in session.output
	assert 'All 1 packages installed!' in session.output


def test_unexpected_error_exits_one(session: Session, catalog_file: Path, monkeypatch: MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
	def explode(tasks):
		raise RuntimeError('boom')

	monkeypatch.setattr(tuxmate_main, 'apply_desktop_config', explode)

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 1

	err = capsys.readouterr().err
	assert 'RuntimeError: boom' in err


def test_missing_helper_only_installs_other_phases(session: Session, catalog_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
	session.helper_available = False

	assert tuxmate_main.main(['--catalog', str(catalog_file)]) == 0

	out = capsys.readouterr().out
	assert 'paru is not available, skipping 2 AUR packages' in out
	assert 'Installing 6 packages' not in out
	assert 'All 4 packages installed!' in session.output
