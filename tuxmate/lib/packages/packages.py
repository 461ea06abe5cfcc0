from ..exceptions import RequirementError
from ..general import CommandRunner, run
from ..output import debug
from ..pacman import Pacman


def is_installed(package: str, runner: CommandRunner = run) -> bool:
	"""
	True when the package database knows ``package``, in any version.
	A package that is not found is the False case, not an error.
	"""
	try:
		result = runner(Pacman.query_argv(package), None)
	except (OSError, RequirementError) as err:
		debug(f'Could not query the package database for {package}: {err}')
		return False

	return result.returncode == 0
