import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path


def _default_log_dir() -> Path:
	if state_home := os.environ.get('XDG_STATE_HOME'):
		return Path(state_home) / 'tuxmate'

	return Path.home() / '.local' / 'state' / 'tuxmate'


class Journald:
	@staticmethod
	def log(message: str, level: int = logging.DEBUG) -> None:
		try:
			import systemd.journal  # type: ignore[import-not-found]
		except ModuleNotFoundError:
			return None

		log_adapter = logging.getLogger('tuxmate')
		if log_adapter.handlers:
			log_adapter.log(level, message)
			return None

		log_fmt = logging.Formatter('[%(levelname)s]: %(message)s')
		log_ch = systemd.journal.JournalHandler()
		log_ch.setFormatter(log_fmt)
		log_adapter.addHandler(log_ch)
		log_adapter.setLevel(logging.DEBUG)

		log_adapter.log(level, message)


class Logger:
	def __init__(self, path: Path | None = None) -> None:
		self._path = path or _default_log_dir()
		self.verbose = False

	@property
	def path(self) -> Path:
		return self._path / 'install.log'

	@property
	def directory(self) -> Path:
		return self._path

	def set_directory(self, path: Path) -> None:
		self._path = path

	def _check_permissions(self) -> None:
		log_file = self.path

		try:
			self._path.mkdir(exist_ok=True, parents=True)
			log_file.touch(exist_ok=True)

			with log_file.open('a') as f:
				f.write('')
		except PermissionError:
			# Fallback to creating the log file in the current folder
			self._path = Path('./').absolute()

			warn(f'Not enough permission to place log file at {log_file}, creating it in {self.path} instead')

	def log(self, level: int, content: str) -> None:
		self._check_permissions()

		with self.path.open('a') as f:
			ts = _timestamp()
			level_name = logging.getLevelName(level)
			f.write(f'[{ts}] - {level_name} - {content}\n')


logger = Logger()


def _supports_color() -> bool:
	"""
	Found first reference here:
		https://stackoverflow.com/questions/7445658/how-to-detect-if-the-console-does-support-ansi-escape-codes-in-python
	And re-used this:
		https://github.com/django/django/blob/master/django/core/management/color.py#L12

	Return True if the running system's terminal supports color,
	and False otherwise.
	"""
	supported_platform = sys.platform != 'win32' or 'ANSICON' in os.environ

	# isatty is not always implemented, #6223.
	is_a_tty = hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()
	return supported_platform and is_a_tty


class Font(Enum):
	bold = '1'
	dim = '2'
	italic = '3'
	underscore = '4'


_COLORS = {
	'black': '0',
	'red': '1',
	'green': '2',
	'yellow': '3',
	'blue': '4',
	'magenta': '5',
	'cyan': '6',
	'white': '7',
	'gray': '8;5;246',
	'grey': '8;5;246',
}


def stylize(
	text: str,
	fg: str | None = None,
	font: list[Font] = [],
) -> str:
	"""
	Heavily influenced by:
		https://github.com/django/django/blob/ae8338daf34fd746771e0678081999b656177bae/django/utils/termcolors.py#L13

	Wraps text in ANSI SGR codes. Callers decide whether the target stream
	can render them.
	"""
	code_list = []

	if fg:
		code_list.append(f'3{_COLORS[fg]}')

	for o in font:
		code_list.append(o.value)

	if not code_list:
		return text

	ansi = ';'.join(code_list)

	return f'\033[{ansi}m{text}\033[0m'


def _timestamp() -> str:
	now = datetime.now(tz=UTC)
	return now.strftime('%Y-%m-%d %H:%M:%S')


def info(
	*msgs: str,
	level: int = logging.INFO,
	fg: str = 'blue',
	prefix: str = '::',
) -> None:
	log(*msgs, level=level, fg=fg, prefix=prefix)


def debug(
	*msgs: str,
	level: int = logging.DEBUG,
	fg: str = 'gray',
	prefix: str = '',
) -> None:
	log(*msgs, level=level, fg=fg, prefix=prefix)


def error(
	*msgs: str,
	level: int = logging.ERROR,
	fg: str = 'red',
	prefix: str = '✗',
) -> None:
	log(*msgs, level=level, fg=fg, prefix=prefix)


def warn(
	*msgs: str,
	level: int = logging.WARNING,
	fg: str = 'yellow',
	prefix: str = '!',
) -> None:
	log(*msgs, level=level, fg=fg, prefix=prefix)


def log(
	*msgs: str,
	level: int = logging.INFO,
	fg: str = 'white',
	prefix: str = '',
) -> None:
	text = ' '.join([str(x) for x in msgs])

	logger.log(level, text)
	Journald.log(text, level=level)

	if level == logging.DEBUG and not logger.verbose:
		return

	# only the prefix glyph is coloured, the message stays readable on any theme
	if prefix:
		if _supports_color():
			prefix = stylize(prefix, fg)
		text = f'{prefix} {text}'

	stream = sys.stderr if level >= logging.ERROR else sys.stdout
	print(text, file=stream, flush=True)


def success(
	*msgs: str,
	level: int = logging.INFO,
	fg: str = 'green',
	prefix: str = '✓',
) -> None:
	log(*msgs, level=level, fg=fg, prefix=prefix)


def skip(
	*msgs: str,
	level: int = logging.INFO,
	fg: str = 'gray',
	prefix: str = '○',
) -> None:
	log(*msgs, level=level, fg=fg, prefix=prefix)
