from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class UnitKind(StrEnum):
	PACKAGE_MANAGER = 'pacman'
	HELPER = 'aur'
	EXTENSION = 'extension'

	def label(self) -> str:
		match self:
			case UnitKind.PACKAGE_MANAGER:
				return 'pacman'
			case UnitKind.HELPER:
				return 'AUR'
			case UnitKind.EXTENSION:
				return 'EXT'


class ExtensionRecipe(BaseModel):
	"""
	Declarative install procedure for a desktop extension:
	clone ``repository``, run every ``build`` command inside the checkout,
	then optionally move the checkout to the extension directory.
	"""

	model_config = ConfigDict(frozen=True)

	repository: str
	build: tuple[tuple[str, ...], ...] = ()
	move_into_place: bool = False

	@model_validator(mode='after')
	def check_steps(self) -> Self:
		if not self.build and not self.move_into_place:
			raise ValueError(f'Recipe for {self.repository} neither builds nor installs anything')

		for argv in self.build:
			if not argv:
				raise ValueError(f'Recipe for {self.repository} contains an empty build command')

		return self


class InstallUnit(BaseModel):
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	display_name: str = Field(alias='name')
	identifier: str
	kind: UnitKind
	recipe: ExtensionRecipe | None = None

	@model_validator(mode='after')
	def check_recipe(self) -> Self:
		if self.kind == UnitKind.EXTENSION and self.recipe is None:
			raise ValueError(f'Extension "{self.display_name}" requires a recipe')

		if self.kind != UnitKind.EXTENSION and self.recipe is not None:
			raise ValueError(f'Only extensions carry a recipe, "{self.display_name}" is a {self.kind.label()} unit')

		return self
