import argparse
from argparse import ArgumentParser
from importlib.metadata import version
from pathlib import Path

from pydantic.dataclasses import dataclass as p_dataclass


@p_dataclass
class Arguments:
	catalog: Path | None = None
	log_dir: Path | None = None
	debug: bool = False


class TuxmateConfigHandler:
	"""
	Running without any flag is the normal mode; the flags only point the
	installer at another catalog or log location.
	"""

	def __init__(self, argv: list[str] | None = None) -> None:
		self._parser: ArgumentParser = self._define_arguments()
		self._args = self._parse_args(argv)

	@property
	def args(self) -> Arguments:
		return self._args

	def _get_version(self) -> str:
		try:
			return version('tuxmate')
		except Exception:
			return 'Tuxmate version not found'

	def _define_arguments(self) -> ArgumentParser:
		parser = ArgumentParser(
			prog='tuxmate',
			description='Installs a curated set of desktop applications on Arch Linux.',
			formatter_class=argparse.ArgumentDefaultsHelpFormatter,
		)
		parser.add_argument(
			'-v',
			'--version',
			action='version',
			version='%(prog)s ' + self._get_version(),
		)
		parser.add_argument(
			'--catalog',
			type=Path,
			nargs='?',
			default=None,
			help='JSON catalog to install instead of the bundled one',
		)
		parser.add_argument(
			'--log-dir',
			type=Path,
			nargs='?',
			default=None,
			help='Directory for install.log and cmd_history.txt',
		)
		parser.add_argument(
			'--debug',
			action='store_true',
			default=False,
			help='Also print debug messages to the terminal',
		)

		return parser

	def _parse_args(self, argv: list[str] | None) -> Arguments:
		args = self._parser.parse_args(argv)
		return Arguments(**vars(args))
