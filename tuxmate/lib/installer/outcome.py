from dataclasses import dataclass

from ..models.units import InstallUnit
from .classify import FailureKind


@dataclass(frozen=True)
class Succeeded:
	unit: InstallUnit
	elapsed: float


@dataclass(frozen=True)
class Skipped:
	unit: InstallUnit
	already_present: bool = True


@dataclass(frozen=True)
class Failed:
	unit: InstallUnit
	reason: FailureKind
	output: str = ''
	step: str | None = None


type InstallOutcome = Succeeded | Skipped | Failed
