"""KML conversion activity: composable pipeline.

Converts an uploaded KML document into a GeoJSON-shaped
``FeatureCollection``. One Feature is produced per Placemark, in
document order.

The conversion is split into focused stages:
- **_validation**: empty-input, XML, and ``<kml>`` root checks
- **_normalization**: namespace-agnostic lookup, coordinate text, metadata
- **_lxml_converter**: Placemark walk and geometry mapping

Supported KML structures:
- Point, LineString, LinearRing (as LineString), Polygon with holes
- MultiGeometry (one member -> that member, several -> GeometryCollection)
- gx:Track (as LineString), gx:MultiTrack (as MultiLineString)
- Nested Folder / Document hierarchies
- ExtendedData/Data and Schema/SchemaData metadata

Malformed input is not repaired: it raises ``ParseFailure``.
"""

from __future__ import annotations

import logging

from kml_viewer.activities.convert_kml._constants import KML_NAMESPACE
from kml_viewer.activities.convert_kml._lxml_converter import convert_tree
from kml_viewer.activities.convert_kml._normalization import (
    extract_extended_data,
    parse_coordinates_text,
    parse_gx_coord,
)
from kml_viewer.activities.convert_kml._validation import ParseFailure, parse_document
from kml_viewer.models.feature import FeatureCollection

logger = logging.getLogger("kml_viewer.activities.convert_kml")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "KML_NAMESPACE",
    "ParseFailure",
    "convert_kml",
    "convert_tree",
    "extract_extended_data",
    "parse_coordinates_text",
    "parse_document",
    "parse_gx_coord",
]


def convert_kml(content: bytes | str, *, source_filename: str = "") -> FeatureCollection:
    """Convert a KML document into a feature collection.

    Args:
        content: Raw document. ``str`` input is encoded as UTF-8; use
            bytes to let the XML declaration pick the encoding.
        source_filename: Original filename, recorded on the collection.

    Returns:
        A ``FeatureCollection`` in document order. Empty if the document
        holds no Placemarks with geometry.

    Raises:
        ParseFailure: If the content is empty, not XML, or not KML.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    logger.info("Converting KML document | file=%s | bytes=%d", source_filename, len(content))

    root = parse_document(content)
    features = convert_tree(root, source_filename)

    logger.info(
        "Converted %d feature(s) | file=%s",
        len(features),
        source_filename,
    )
    return FeatureCollection(features=tuple(features), source_file=source_filename)
