from dataclasses import dataclass
from enum import StrEnum, auto

from .models.catalog import DesktopAppend
from .output import debug, skip, success, warn


class AppendStatus(StrEnum):
	APPENDED = auto()
	ALREADY_CONFIGURED = auto()
	NOT_APPLICABLE = auto()
	FAILED = auto()


@dataclass(frozen=True)
class AppendResult:
	task: DesktopAppend
	status: AppendStatus
	written: tuple[str, ...] = ()


def _read(task: DesktopAppend) -> str:
	try:
		return task.path.read_text()
	except FileNotFoundError:
		return ''


def pending_lines(task: DesktopAppend, content: str) -> list[str]:
	"""
	Lines that still have to be appended. Marker guarded tasks are all or
	nothing, directory guarded tasks only add lines not present yet.
	"""
	if task.marker is not None:
		if task.marker in content:
			return []
		return list(task.lines)

	present = set(content.splitlines())
	return [line for line in task.lines if line not in present]


def apply_append(task: DesktopAppend) -> AppendResult:
	if task.require_dir is not None and not task.require_dir.is_dir():
		debug(f'{task.description}: {task.require_dir} does not exist, nothing to do')
		return AppendResult(task, AppendStatus.NOT_APPLICABLE)

	try:
		content = _read(task)
		lines = pending_lines(task, content)

		if not lines:
			return AppendResult(task, AppendStatus.ALREADY_CONFIGURED)

		task.path.parent.mkdir(parents=True, exist_ok=True)

		with task.path.open('a') as fh:
			if content and not content.endswith('\n'):
				fh.write('\n')
			fh.write(''.join(f'{line}\n' for line in lines))
	except OSError as err:
		warn(f'{task.description}: could not update {task.path}: {err}')
		return AppendResult(task, AppendStatus.FAILED)

	return AppendResult(task, AppendStatus.APPENDED, tuple(lines))


def apply_desktop_config(tasks: tuple[DesktopAppend, ...]) -> list[AppendResult]:
	results = []

	for task in tasks:
		result = apply_append(task)

		match result.status:
			case AppendStatus.APPENDED:
				success(f'{task.description} configured ({task.path})')
			case AppendStatus.ALREADY_CONFIGURED:
				skip(f'{task.description} (already configured)')

		results.append(result)

	return results
