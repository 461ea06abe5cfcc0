from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .units import InstallUnit, UnitKind


class DesktopAppend(BaseModel):
	"""
	Lines appended to a per-user config file.

	With a ``marker`` the append happens only when the marker is absent
	from the file. With ``require_dir`` it happens only when that directory
	exists, and lines already present are left out.
	"""

	model_config = ConfigDict(frozen=True)

	description: str
	path: Path
	lines: tuple[str, ...]
	marker: str | None = None
	require_dir: Path | None = None

	@field_validator('path', 'require_dir', mode='after')
	@classmethod
	def expand_user(cls, value: Path | None) -> Path | None:
		return value.expanduser() if value is not None else None

	@model_validator(mode='after')
	def check_guard(self) -> Self:
		if self.marker is None and self.require_dir is None:
			raise ValueError(f'"{self.description}" needs a marker or a required directory to stay idempotent')
		return self


class PostInstallCommand(BaseModel):
	model_config = ConfigDict(frozen=True)

	description: str
	argv: tuple[str, ...]
	retry: bool = True

	@field_validator('argv', mode='after')
	@classmethod
	def check_argv(cls, value: tuple[str, ...]) -> tuple[str, ...]:
		if not value:
			raise ValueError('argv must not be empty')
		return value


class Catalog(BaseModel):
	model_config = ConfigDict(frozen=True)

	units: tuple[InstallUnit, ...]
	extensions_dir: Path = Field(default=Path('~/.local/share/gnome-shell/extensions'), validate_default=True)
	desktop: tuple[DesktopAppend, ...] = ()
	post_install: tuple[PostInstallCommand, ...] = ()

	@field_validator('extensions_dir', mode='after')
	@classmethod
	def expand_user(cls, value: Path) -> Path:
		return value.expanduser()

	@model_validator(mode='after')
	def check_unique(self) -> Self:
		seen: set[tuple[UnitKind, str]] = set()

		for unit in self.units:
			key = (unit.kind, unit.identifier)
			if key in seen:
				raise ValueError(f'{unit.kind.label()} unit {unit.identifier} is listed more than once')
			seen.add(key)

		return self

	def units_of(self, kind: UnitKind) -> list[InstallUnit]:
		return [unit for unit in self.units if unit.kind == kind]
