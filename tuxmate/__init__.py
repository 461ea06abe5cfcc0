"""Arch Linux app installer - curated desktop applications in one go."""

from .lib.exceptions import CatalogError, HelperBootstrapError, PrivilegeError, RequirementError, SysCallError
from .lib.installer import BatchRunner, BatchState, RetryingExecutor, build_runner
from .lib.models import Catalog, ExtensionRecipe, InstallUnit, UnitKind
from .lib.output import debug, error, info, log, warn
from .lib.pacman import Pacman, Paru
from .main import main

__all__ = [
	'BatchRunner',
	'BatchState',
	'Catalog',
	'CatalogError',
	'ExtensionRecipe',
	'HelperBootstrapError',
	'InstallUnit',
	'Pacman',
	'Paru',
	'PrivilegeError',
	'RequirementError',
	'RetryingExecutor',
	'SysCallError',
	'UnitKind',
	'build_runner',
	'debug',
	'error',
	'info',
	'log',
	'main',
	'warn',
]
