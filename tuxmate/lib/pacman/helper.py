import shutil
import tempfile
from pathlib import Path

from ..exceptions import HelperBootstrapError, RequirementError, SysCallError
from ..general import CommandRunner, format_cmd, has_binary, run, run_checked
from ..output import debug, info, success, warn
from .pacman import Pacman


class Paru:
	"""
	AUR helper used for the helper phase. It is only ever invoked when
	already on PATH or after a successful one-time bootstrap.
	"""

	name = 'paru'
	repository = 'https://aur.archlinux.org/paru.git'
	build_dependencies = ('git', 'base-devel')

	@classmethod
	def available(cls) -> bool:
		return has_binary(cls.name)

	@classmethod
	def install_argv(cls, *packages: str) -> list[str]:
		return [cls.name, '-S', '--needed', '--noconfirm', *packages]

	@classmethod
	def bootstrap(cls, runner: CommandRunner = run) -> None:
		"""
		Builds and installs paru from the AUR. Raises HelperBootstrapError
		when any step fails or paru is still missing afterwards.
		"""
		warn(f'Installing {cls.name} for AUR packages...')

		workdir = Path(tempfile.mkdtemp(prefix='tuxmate-'))
		checkout = workdir / cls.name

		steps = [
			(None, Pacman.install_argv(*cls.build_dependencies), 'Installing build dependencies...'),
			(None, ['git', 'clone', cls.repository, str(checkout)], f'Cloning {cls.name} from AUR...'),
			(checkout, ['makepkg', '-si', '--noconfirm'], f'Building {cls.name} (this takes ~2-5 min)...'),
		]

		try:
			for cwd, argv, message in steps:
				info(message)

				try:
					run_checked(argv, cwd, runner)
				except (OSError, RequirementError) as err:
					raise HelperBootstrapError(f'{format_cmd(argv)} could not be started: {err}') from err
				except SysCallError as err:
					debug(err.message)
					raise HelperBootstrapError(f'{format_cmd(argv)} exited with {err.exit_code}') from err
		finally:
			shutil.rmtree(workdir, ignore_errors=True)

		if not cls.available():
			raise HelperBootstrapError(f'{cls.name} installation failed')

		success(f'{cls.name} installed successfully')
