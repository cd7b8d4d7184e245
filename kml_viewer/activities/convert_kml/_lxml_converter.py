"""lxml-based KML to GeoJSON converter.

Walks the element tree and turns every Placemark, in document order,
into a GeoJSON-shaped Feature. Folder and Document nesting is ignored
for ordering purposes: a Placemark's position in the file is its
position in the collection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml_viewer.activities.convert_kml._constants import GEOMETRY_TAGS
from kml_viewer.activities.convert_kml._normalization import (
    child_text,
    extract_extended_data,
    extract_name,
    find_child,
    iter_children,
    local_name,
    parse_coordinates_text,
    parse_gx_coord,
)
from kml_viewer.models.feature import Feature, Geometry

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml_viewer.activities.convert_kml")


def convert_tree(root: _Element, source_filename: str) -> list[Feature]:
    """Convert every Placemark under *root* into a Feature.

    Placemarks without any usable geometry are skipped with a warning,
    so every returned feature has a non-empty geometry type.
    """
    features: list[Feature] = []

    placemarks = [el for el in root.iter() if local_name(el) == "Placemark"]

    for idx, pm in enumerate(placemarks):
        name = extract_name(pm)

        geometries: list[Geometry] = []
        for child in pm:
            if local_name(child) in GEOMETRY_TAGS:
                geometries.extend(_parse_geometry(child))

        geometry = _combine_geometries(geometries)
        if geometry is None:
            logger.warning(
                "Skipping Placemark without geometry | index=%d | name=%s | file=%s",
                idx,
                name or "<unnamed>",
                source_filename,
            )
            continue

        features.append(
            Feature(
                geometry=geometry,
                name=name,
                description=child_text(pm, "description") or "",
                properties=extract_extended_data(pm),
                feature_index=idx,
            )
        )

    return features


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_geometry(elem: _Element) -> list[Geometry]:
    """Parse one geometry element into zero or more GeoJSON geometries.

    ``MultiGeometry`` is flattened into its members; every other element
    yields at most one geometry.
    """
    tag = local_name(elem)

    if tag == "MultiGeometry":
        members: list[Geometry] = []
        for child in elem:
            if local_name(child) in GEOMETRY_TAGS:
                members.extend(_parse_geometry(child))
        return members

    if tag == "Point":
        coords = _coordinates_of(elem)
        if not coords:
            return []
        return [Geometry(type="Point", coordinates=coords[0])]

    if tag in ("LineString", "LinearRing"):
        return [Geometry(type="LineString", coordinates=_coordinates_of(elem))]

    if tag == "Polygon":
        rings = _polygon_rings(elem)
        if not rings:
            return []
        return [Geometry(type="Polygon", coordinates=rings)]

    if tag == "Track":
        return [Geometry(type="LineString", coordinates=_track_coordinates(elem))]

    if tag == "MultiTrack":
        tracks = [_track_coordinates(t) for t in iter_children(elem, "Track")]
        return [Geometry(type="MultiLineString", coordinates=tracks)]

    return []


def _combine_geometries(geometries: list[Geometry]) -> Geometry | None:
    """Collapse a Placemark's geometries into a single GeoJSON geometry.

    One geometry is returned as-is. Several geometries always become a
    ``GeometryCollection``, even when every member has the same type.
    """
    if not geometries:
        return None
    if len(geometries) == 1:
        return geometries[0]
    return Geometry(type="GeometryCollection", geometries=tuple(geometries))


def _coordinates_of(elem: _Element) -> list[tuple[float, float]]:
    text = child_text(elem, "coordinates")
    if not text:
        return []
    return parse_coordinates_text(text)


def _polygon_rings(polygon: _Element) -> list[list[tuple[float, float]]]:
    """Exterior ring followed by interior rings; empty if there is no exterior."""
    outer = find_child(polygon, "outerBoundaryIs", "LinearRing")
    exterior = _coordinates_of(outer) if outer is not None else []
    if not exterior:
        return []

    rings = [exterior]
    for inner_boundary in iter_children(polygon, "innerBoundaryIs"):
        for ring_elem in iter_children(inner_boundary, "LinearRing"):
            ring = _coordinates_of(ring_elem)
            if ring:
                rings.append(ring)
    return rings


def _track_coordinates(track: _Element) -> list[tuple[float, float]]:
    coords: list[tuple[float, float]] = []
    for coord_elem in iter_children(track, "coord"):
        coord = parse_gx_coord(coord_elem.text or "")
        if coord is not None:
            coords.append(coord)
    return coords
