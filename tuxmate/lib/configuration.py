import json
from pathlib import Path

from pydantic import ValidationError

from .exceptions import CatalogError
from .models.catalog import Catalog
from .models.units import UnitKind
from .output import debug

DEFAULT_CATALOG = Path(__file__).parent.parent / 'catalogs' / 'default.json'


def load_catalog(path: Path | None = None) -> Catalog:
	"""
	Reads and validates a catalog file. Totals and phases are always derived
	from what the file contains.
	"""
	path = path or DEFAULT_CATALOG

	try:
		data = json.loads(path.read_text())
	except FileNotFoundError as err:
		raise CatalogError(f'Catalog {path} does not exist') from err
	except json.JSONDecodeError as err:
		raise CatalogError(f'Catalog {path} is not valid JSON: {err}') from err

	try:
		catalog = Catalog.model_validate(data)
	except ValidationError as err:
		raise CatalogError(f'Catalog {path} is invalid:\n{err}') from err

	counts = ', '.join(f'{len(catalog.units_of(kind))} {kind.label()}' for kind in UnitKind)
	debug(f'Loaded catalog {path}: {counts}')

	return catalog
