from pathlib import Path

import pytest
from pytest import MonkeyPatch

from tuxmate.lib.exceptions import HelperBootstrapError, RequirementError, SysCallError
from tuxmate.lib.packages import is_installed
from tuxmate.lib.pacman import Pacman, Paru


def test_wait_for_lock_polls_until_released(tmp_path: Path) -> None:
	lock = tmp_path / 'db.lck'
	lock.touch()
	sleeps: list[float] = []

	def sleep(seconds: float) -> None:
		sleeps.append(seconds)
		if len(sleeps) == 2:
			lock.unlink()

	assert Pacman.wait_for_lock(lock, sleep=sleep) == 2
	assert sleeps == [2.0, 2.0]


def test_wait_for_lock_gives_up_when_stopped(tmp_path: Path) -> None:
	lock = tmp_path / 'db.lck'
	lock.touch()
	stop = [False]

	def sleep(seconds: float) -> None:
		stop[0] = True

	assert Pacman.wait_for_lock(lock, sleep=sleep, should_stop=lambda: stop[0]) == 1
	assert lock.exists()


def test_wait_for_lock_without_lock(tmp_path: Path) -> None:
	assert Pacman.wait_for_lock(tmp_path / 'db.lck', sleep=lambda _: pytest.fail('should not wait')) == 0


def test_command_lines() -> None:
	assert Pacman.sync_argv() == ['sudo', 'pacman', '-Sy', '--noconfirm']
	assert Pacman.install_argv('vlc') == ['sudo', 'pacman', '-S', '--needed', '--noconfirm', 'vlc']
	assert Paru.install_argv('zen-browser-bin') == ['paru', '-S', '--needed', '--noconfirm', 'zen-browser-bin']


def test_is_installed(scripted_runner, pacman_info_fixture: Path) -> None:
	runner = scripted_runner(default=(1, "error: package 'nope' was not found")).script(
		'--info vlc',
		(0, pacman_info_fixture.read_text()),
	)

	assert is_installed('vlc', runner)
	assert not is_installed('nope', runner)
	assert runner.commands()[0] == ('pacman', '-Q', '--info', 'vlc')


def test_is_installed_without_pacman() -> None:
	def runner(argv, cwd=None):
		raise RequirementError('Binary pacman does not exist.')

	assert not is_installed('vlc', runner)


def test_paru_bootstrap(monkeypatch: MonkeyPatch, scripted_runner) -> None:
	monkeypatch.setattr('tuxmate.lib.pacman.helper.has_binary', lambda name: True)
	runner = scripted_runner()

	Paru.bootstrap(runner)

	commands = runner.commands()
	assert commands[0] == ('sudo', 'pacman', '-S', '--needed', '--noconfirm', 'git', 'base-devel')
	assert commands[1][:3] == ('git', 'clone', 'https://aur.archlinux.org/paru.git')
	assert commands[2] == ('makepkg', '-si', '--noconfirm')
	assert runner.calls[2][1] == Path(commands[1][-1])


def test_paru_bootstrap_failed_step(monkeypatch: MonkeyPatch, scripted_runner) -> None:
	monkeypatch.setattr('tuxmate.lib.pacman.helper.has_binary', lambda name: True)
	runner = scripted_runner().script('makepkg', (1, '==> ERROR: A failure occurred in build().'))

	with pytest.raises(HelperBootstrapError, match='makepkg -si --noconfirm exited with 1') as exc:
		Paru.bootstrap(runner)

	assert isinstance(exc.value.__cause__, SysCallError)
	assert exc.value.__cause__.exit_code == 1


def test_paru_still_missing_after_bootstrap(monkeypatch: MonkeyPatch, scripted_runner) -> None:
	monkeypatch.setattr('tuxmate.lib.pacman.helper.has_binary', lambda name: False)

	with pytest.raises(HelperBootstrapError, match='paru installation failed'):
		Paru.bootstrap(scripted_runner())
