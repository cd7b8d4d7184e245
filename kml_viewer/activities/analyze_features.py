"""Feature analysis activity.

Derives the two analytical views over a converted feature collection:

- a ``SummaryResult`` counting features per geometry type, and
- one ``DetailRow`` per feature with its type, display name, and (for
  LineString / MultiLineString) planar length.

Length is a planar approximation: lon/lat pairs are treated as Cartesian
coordinates and segment lengths are Euclidean. Lengths are rendered with
two decimals, rounding half-up on the exact binary value of the float,
so ``2.005`` (stored as 2.00499...) renders ``"2.00"`` and ``0.125``
renders ``"0.13"``.

The analysis is all-or-nothing: a feature without a geometry type fails
the whole document with ``InvalidFeature`` rather than being skipped,
keeping ``summary.total`` equal to the input feature count.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import TYPE_CHECKING

from kml_viewer.core.constants import (
    LENGTH_DECIMAL_PLACES,
    LENGTH_NOT_APPLICABLE,
    LINE_GEOMETRY_TYPES,
    UNNAMED_FEATURE,
)
from kml_viewer.core.exceptions import ContractError, PermanentError
from kml_viewer.models.analysis import DetailRow, FeatureAnalysis, SummaryResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from kml_viewer.models.feature import Feature

logger = logging.getLogger("kml_viewer.activities.analyze_features")

_LENGTH_QUANTUM = Decimal(1).scaleb(-LENGTH_DECIMAL_PLACES)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InvalidFeature(ContractError):
    """Raised when a feature has no classifiable geometry type."""

    default_stage = "analyze_features"
    default_code = "FEATURE_GEOMETRY_MISSING"


class UnsupportedGeometry(PermanentError):
    """Raised when a length is requested for a non-line geometry."""

    default_stage = "analyze_features"
    default_code = "UNSUPPORTED_GEOMETRY"


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(feature: Feature) -> str:
    """Return the feature's geometry type tag, unmodified.

    Raises:
        InvalidFeature: If the feature has no geometry or an empty type tag.
    """
    geometry_type = feature.geometry_type
    if not geometry_type:
        msg = (
            f"Feature {feature.feature_index} "
            f"('{feature.name or UNNAMED_FEATURE}') has no geometry type"
        )
        raise InvalidFeature(msg)
    return geometry_type


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def compute_length(feature: Feature) -> float:
    """Planar length of a LineString or MultiLineString feature.

    A line with fewer than two points has length 0; a MultiLineString is
    the sum of its member lines (0 when it has none).

    Raises:
        UnsupportedGeometry: If the feature is not line-shaped, or its
            length overflows to infinity.
    """
    geometry_type = feature.geometry_type
    if geometry_type == "LineString":
        length = line_length(feature.coordinates)
    elif geometry_type == "MultiLineString":
        length = sum((line_length(line) for line in feature.coordinates), 0.0)
    else:
        msg = f"Cannot compute length of {geometry_type or 'missing'} geometry"
        raise UnsupportedGeometry(msg)

    if not math.isfinite(length):
        msg = f"Length of feature {feature.feature_index} is not finite"
        raise UnsupportedGeometry(msg, code="LENGTH_NOT_FINITE")
    return length


def line_length(coords: Sequence[Sequence[float]]) -> float:
    """Sum of Euclidean segment lengths along *coords*, in traversal order."""
    if len(coords) < 2:
        return 0.0

    from shapely.geometry import LineString

    return float(LineString([(c[0], c[1]) for c in coords]).length)


def format_length(value: float) -> str:
    """Render a length with two decimals, rounding half-up.

    The exact binary value of *value* is rounded, not its shortest
    decimal repr. Precision grows with the magnitude so very long
    lengths keep every integer digit.
    """
    exact = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + LENGTH_DECIMAL_PLACES + 2)
        return str(exact.quantize(_LENGTH_QUANTUM, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def describe_feature(feature: Feature) -> DetailRow:
    """Build the detail row for a single feature.

    Raises:
        InvalidFeature: If the feature cannot be classified.
    """
    geometry_type = classify(feature)
    if geometry_type in LINE_GEOMETRY_TYPES:
        length = format_length(compute_length(feature))
    else:
        length = LENGTH_NOT_APPLICABLE
    return DetailRow(
        type=geometry_type,
        name=feature.name or UNNAMED_FEATURE,
        length=length,
    )


def analyze_features(features: Iterable[Feature]) -> FeatureAnalysis:
    """Summarise and describe every feature, preserving input order.

    Args:
        features: A ``FeatureCollection`` or any iterable of features.

    Returns:
        ``FeatureAnalysis`` whose ``summary.total`` and ``len(details)``
        both equal the number of input features.

    Raises:
        InvalidFeature: If any feature lacks a geometry type. No partial
            result is returned.
    """
    counts: dict[str, int] = {}
    details: list[DetailRow] = []

    for feature in features:
        row = describe_feature(feature)
        counts[row.type] = counts.get(row.type, 0) + 1
        details.append(row)

    summary = SummaryResult(counts=counts, total=len(details))

    logger.debug(
        "Features analysed | total=%d | types=%s",
        summary.total,
        ",".join(counts),
    )
    return FeatureAnalysis(summary=summary, details=tuple(details))
