from .helper import Paru
from .pacman import Pacman

__all__ = [
	'Pacman',
	'Paru',
]
