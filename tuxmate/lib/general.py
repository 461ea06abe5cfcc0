import os
import re
import shlex
import stat
import subprocess
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from shutil import which

from .exceptions import RequirementError, SysCallError
from .output import logger

# https://stackoverflow.com/a/43627833/929999
_VT100_ESCAPE_REGEX = r'\x1B\[[?0-9;]*[a-zA-Z]'

type CommandRunner = Callable[[Sequence[str], Path | None], subprocess.CompletedProcess[str]]


def locate_binary(name: str) -> str:
	if path := which(name):
		return path
	raise RequirementError(f'Binary {name} does not exist.')


def has_binary(name: str) -> bool:
	return which(name) is not None


def clear_vt100_escape_codes_from_str(data: str) -> str:
	return re.sub(_VT100_ESCAPE_REGEX, '', data)


def format_cmd(cmd: Sequence[str]) -> str:
	return ' '.join(shlex.quote(arg) for arg in cmd)


def _log_cmd(cmd: Sequence[str]) -> None:
	history_logfile = logger.directory / 'cmd_history.txt'

	change_perm = False
	if history_logfile.exists() is False:
		change_perm = True

	try:
		with history_logfile.open('a') as cmd_log:
			cmd_log.write(f'{time.time()} {format_cmd(cmd)}\n')

		if change_perm:
			history_logfile.chmod(stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP)
	except (PermissionError, FileNotFoundError):
		# If history_logfile does not exist, ignore the error
		pass


def run(
	cmd: Sequence[str],
	cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
	"""
	Runs cmd without a shell and returns the completed process with
	stdout and stderr merged into ``.stdout``. A non-zero exit code is
	reported through ``returncode``, never raised.
	"""
	argv = list(cmd)
	if argv and not argv[0].startswith(('/', './')):
		argv[0] = locate_binary(argv[0])

	_log_cmd(argv)

	return subprocess.run(
		argv,
		cwd=cwd,
		stdin=subprocess.DEVNULL,
		stdout=subprocess.PIPE,
		stderr=subprocess.STDOUT,
		text=True,
		errors='backslashreplace',
		env={**os.environ, 'LC_ALL': 'C'},
		check=False,
	)


def run_checked(
	cmd: Sequence[str],
	cwd: Path | None = None,
	runner: CommandRunner = run,
) -> str:
	"""
	Like run() but raises SysCallError on a non-zero exit code and returns
	the merged output otherwise.
	"""
	result = runner(cmd, cwd)

	if result.returncode != 0:
		raise SysCallError(
			f'{format_cmd(cmd)} exited with abnormal exit code [{result.returncode}]: {result.stdout[-500:]}',
			result.returncode,
		)

	return result.stdout
