"""Shared constants: single source of truth.

Centralises the literals that the analyzer, the report model, and the
HTTP layer all agree on.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Feature analysis
# ---------------------------------------------------------------------------

LINE_GEOMETRY_TYPES: frozenset[str] = frozenset({"LineString", "MultiLineString"})
"""Geometry types that carry a computed length in the detail listing."""

UNNAMED_FEATURE: str = "Unnamed"
"""Detail-row name used when a feature has no (or an empty) name."""

LENGTH_NOT_APPLICABLE: str = "N/A"
"""Detail-row length used for every non-line geometry type."""

LENGTH_DECIMAL_PLACES: int = 2
"""Number of decimals shown for line lengths in the detail listing."""

# ---------------------------------------------------------------------------
# Upload boundary
# ---------------------------------------------------------------------------

DEFAULT_ACCEPTED_EXTENSIONS: tuple[str, ...] = (".kml",)

DEFAULT_MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

DEFAULT_TEXT_ENCODING: str = "utf-8"

UPLOAD_FAILURE_MESSAGE: str = "Unable to display this file"
"""User-facing message returned for any failed upload."""
