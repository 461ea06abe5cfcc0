import time
from collections.abc import Callable
from pathlib import Path

from ..output import warn


class Pacman:
	db_lock = Path('/var/lib/pacman/db.lck')

	@staticmethod
	def wait_for_lock(
		lock: Path | None = None,
		interval: float = 2.0,
		sleep: Callable[[float], None] = time.sleep,
		should_stop: Callable[[], bool] = lambda: False,
	) -> int:
		"""
		Blocks until no other pacman session holds the database lock or
		``should_stop`` returns True. Returns the number of times it waited.
		"""
		lock = lock or Pacman.db_lock
		waited = 0

		while lock.exists() and not should_stop():
			warn('Waiting for pacman lock...')
			sleep(interval)
			waited += 1

		return waited

	@staticmethod
	def sync_argv() -> list[str]:
		return ['sudo', 'pacman', '-Sy', '--noconfirm']

	@staticmethod
	def install_argv(*packages: str) -> list[str]:
		return ['sudo', 'pacman', '-S', '--needed', '--noconfirm', *packages]

	@staticmethod
	def query_argv(package: str) -> list[str]:
		return ['pacman', '-Q', '--info', package]
