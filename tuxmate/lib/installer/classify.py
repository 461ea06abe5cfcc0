"""
Best-effort classification of failed command output.

pacman, paru, git and friends do not promise a stable output format, so
these substring checks only pick a hint to show next to a failure. They
never decide whether something succeeded.
"""

from enum import StrEnum

from ..models.units import UnitKind

TRANSIENT_MARKERS = (
	'network',
	'connection',
	'timeout',
	'unreachable',
	'resolve',
)


class FailureKind(StrEnum):
	TRANSIENT_NETWORK = 'transient-network'
	NOT_FOUND = 'not-found'
	SIGNATURE_MISMATCH = 'signature-mismatch'
	GENERIC = 'generic'


def is_transient(output: str, markers: tuple[str, ...] = TRANSIENT_MARKERS) -> bool:
	haystack = output.lower()
	return any(marker in haystack for marker in markers)


def classify(output: str, kind: UnitKind) -> FailureKind:
	haystack = output.lower()

	if 'target not found' in haystack:
		return FailureKind.NOT_FOUND

	if kind == UnitKind.PACKAGE_MANAGER and 'signature' in haystack:
		return FailureKind.SIGNATURE_MISMATCH

	if is_transient(output):
		return FailureKind.TRANSIENT_NETWORK

	return FailureKind.GENERIC


def failure_hint(failure: FailureKind, kind: UnitKind) -> str | None:
	match failure:
		case FailureKind.NOT_FOUND:
			if kind == UnitKind.HELPER:
				return 'Package not found in AUR'
			return 'Package not found'
		case FailureKind.SIGNATURE_MISMATCH:
			return 'GPG issue - try: sudo pacman-key --refresh-keys'
		case FailureKind.TRANSIENT_NETWORK:
			return 'Network error persisted after retries'
		case FailureKind.GENERIC:
			return None
