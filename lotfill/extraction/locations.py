from collections.abc import Iterator, Mapping
from types import MappingProxyType

from lotfill.extraction.models import LocationEntry

# Plant codes as printed on lot documents. Iteration order is the order used
# for label matching.
LOCATION_TABLE: Mapping[str, str] = MappingProxyType(
    {
        "004": "Cleveland Truck Plant, Cleveland, NC",
        "013": "Saltillo Truck Plant, Saltillo, MX",
        "017": "Mt. Holly Truck Plant, Mt. Holly, NC",
        "058": "Toluca, MX",
    }
)


def location_for_code(code: str) -> LocationEntry | None:
    label = LOCATION_TABLE.get(code)
    return LocationEntry(code=code, label=label) if label is not None else None


def iter_locations() -> Iterator[LocationEntry]:
    for code, label in LOCATION_TABLE.items():
        yield LocationEntry(code=code, label=label)
