from .catalog import Catalog, DesktopAppend, PostInstallCommand
from .units import ExtensionRecipe, InstallUnit, UnitKind

__all__ = [
	'Catalog',
	'DesktopAppend',
	'ExtensionRecipe',
	'InstallUnit',
	'PostInstallCommand',
	'UnitKind',
]
