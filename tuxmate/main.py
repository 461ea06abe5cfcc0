"""Arch Linux app installer - curated desktop applications in one go."""

import os
import sys
import textwrap
import traceback

from tuxmate.lib.args import TuxmateConfigHandler
from tuxmate.lib.configuration import load_catalog
from tuxmate.lib.desktop import apply_desktop_config
from tuxmate.lib.exceptions import CatalogError, HelperBootstrapError, PrivilegeError
from tuxmate.lib.installer import BatchRunner, Cancellation, RetryingExecutor, build_runner
from tuxmate.lib.models.catalog import PostInstallCommand
from tuxmate.lib.pacman import Pacman, Paru

from .lib.output import error, info, logger, success, warn

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CANCELLED = 130


def _check_privileges() -> None:
	if os.geteuid() == 0:
		raise PrivilegeError('Run as regular user, not root.')


def _sync_databases(executor: RetryingExecutor) -> bool:
	info('Syncing databases...')

	if executor.execute(Pacman.sync_argv()).ok:
		success('Synced')
		return True

	warn('Sync failed, continuing...')
	return False


def _ensure_helper() -> None:
	if not Paru.available():
		Paru.bootstrap()


def _run_post_install(
	commands: tuple[PostInstallCommand, ...],
	executor: RetryingExecutor,
	cancellation: Cancellation,
) -> bool:
	"""
	Best-effort follow-up commands. Their failures are reported but never
	count as unit failures. Returns False when cancelled midway.
	"""
	for command in commands:
		if cancellation.is_set():
			return False

		if command.retry:
			ok = executor.execute(command.argv).ok
		else:
			ok = executor.execute_once(command.argv).ok

		if ok:
			success(f'{command.description} ready')
		else:
			warn(f'{command.description} skipped, see {logger.path} for details')

	return True


def run(argv: list[str] | None = None) -> int:
	handler = TuxmateConfigHandler(argv)
	args = handler.args

	if args.log_dir:
		logger.set_directory(args.log_dir)
	logger.verbose = args.debug

	try:
		_check_privileges()
		catalog = load_catalog(args.catalog)
	except (PrivilegeError, CatalogError) as err:
		error(str(err))
		return EXIT_FATAL

	cancellation = Cancellation()
	cancellation.install_handler()

	batch: BatchRunner = build_runner(catalog, cancellation=cancellation)
	executor = RetryingExecutor(should_stop=cancellation.is_set, notify=batch.reporter.note)

	try:
		Pacman.wait_for_lock(should_stop=cancellation.is_set)

		if cancellation.is_set():
			batch.abort()
			return EXIT_CANCELLED

		batch.reporter.checkpoint('Starting base setup (syncing pacman)')
		_sync_databases(executor)

		if cancellation.is_set():
			batch.abort()
			return EXIT_CANCELLED

		try:
			_ensure_helper()
		except HelperBootstrapError as err:
			if cancellation.is_set():
				batch.abort()
				return EXIT_CANCELLED

			error(str(err))
			return EXIT_FATAL

		result = batch.run_all(catalog)
		if result.cancelled:
			return EXIT_CANCELLED

		batch.reporter.checkpoint('Final configuration')
		apply_desktop_config(catalog.desktop)

		if not _run_post_install(catalog.post_install, executor, cancellation):
			batch.abort()
			return EXIT_CANCELLED
	except KeyboardInterrupt:
		batch.abort()
		return EXIT_CANCELLED

	batch.report()
	return EXIT_OK


def _error_message(exc: Exception) -> None:
	err = ''.join(traceback.format_exception(exc))
	error(err)

	text = textwrap.dedent(
		f"""\
		Tuxmate experienced the above error. If you think this is a bug, please report it to
		https://github.com/abusoww/tuxmate and include the log file "{logger.path}".
		"""
	)
	warn(text)


def main(argv: list[str] | None = None) -> int:
	rc = 0
	exc = None

	try:
		rc = run(argv)
	except Exception as e:
		exc = e
	finally:
		if exc:
			_error_message(exc)
			rc = 1

	return rc


if __name__ == '__main__':
	sys.exit(main())
