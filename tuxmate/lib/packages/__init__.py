from .packages import is_installed

__all__ = [
	'is_installed',
]
