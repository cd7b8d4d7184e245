"""Element-tree and text normalization helpers for KML conversion.

Responsibilities:
- Namespace-agnostic child lookup (KML 2.0, 2.1, 2.2 and gx: tags)
- Parse KML coordinate text strings and gx:coord values
- Extract Placemark name, description, and ExtendedData
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import _Element

# ---------------------------------------------------------------------------
# Element lookup
# ---------------------------------------------------------------------------


def local_name(elem: _Element) -> str:
    """Return the tag without namespace (``""`` for comments and PIs)."""
    tag = elem.tag
    if not isinstance(tag, str):
        return ""
    return tag.rpartition("}")[2]


def iter_children(elem: _Element, name: str) -> Iterator[_Element]:
    """Yield direct children whose local name is *name*."""
    for child in elem:
        if local_name(child) == name:
            yield child


def find_child(elem: _Element, *path: str) -> _Element | None:
    """Follow a path of local names through direct children."""
    current: _Element | None = elem
    for name in path:
        if current is None:
            return None
        current = next(iter_children(current, name), None)
    return current


def child_text(elem: _Element, name: str) -> str | None:
    """Stripped text of the first child named *name*, or ``None`` if absent."""
    child = find_child(elem, name)
    if child is None:
        return None
    return (child.text or "").strip()


# ---------------------------------------------------------------------------
# Coordinate text parsing
# ---------------------------------------------------------------------------


def parse_coordinates_text(text: str) -> list[tuple[float, float]]:
    """Parse KML coordinate text (``lon,lat,alt lon,lat,alt ...``) to (lon, lat) tuples.

    Tokens that are not numeric (or not finite) are skipped.
    """
    coords: list[tuple[float, float]] = []
    for token in text.split():
        parts = token.strip().split(",")
        if len(parts) >= 2:
            coord = _to_pair(parts[0], parts[1])
            if coord is not None:
                coords.append(coord)
    return coords


def parse_gx_coord(text: str) -> tuple[float, float] | None:
    """Parse a ``gx:coord`` value (``lon lat alt``, space separated)."""
    parts = text.split()
    if len(parts) < 2:
        return None
    return _to_pair(parts[0], parts[1])


def _to_pair(lon_text: str, lat_text: str) -> tuple[float, float] | None:
    try:
        lon = float(lon_text)
        lat = float(lat_text)
    except ValueError:
        return None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return (lon, lat)


# ---------------------------------------------------------------------------
# Placemark metadata
# ---------------------------------------------------------------------------


def extract_name(placemark: _Element) -> str | None:
    """Placemark ``<name>``, or ``None`` when missing or blank."""
    return child_text(placemark, "name") or None


def extract_extended_data(placemark: _Element) -> dict[str, str]:
    """Extract ExtendedData metadata from a Placemark element.

    Handles both KML metadata patterns:
    - ``ExtendedData/Data/value``: untyped key-value pairs.
    - ``ExtendedData/SchemaData/SimpleData``: typed fields defined by a
      ``<Schema>`` element.
    """
    metadata: dict[str, str] = {}
    for extended in iter_children(placemark, "ExtendedData"):
        for data_elem in iter_children(extended, "Data"):
            key = data_elem.get("name", "")
            value = child_text(data_elem, "value")
            if key and value:
                metadata[key] = value

        for schema_data in iter_children(extended, "SchemaData"):
            for simple_data in iter_children(schema_data, "SimpleData"):
                key = simple_data.get("name", "")
                if key and simple_data.text and simple_data.text.strip():
                    metadata[key] = simple_data.text.strip()

    return metadata
