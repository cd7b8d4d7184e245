"""Tests for the analyze_features activity.

Covers:
- Geometry classification (tag passthrough, missing geometry)
- Planar length for LineString / MultiLineString, including empty cases
- Two-decimal length formatting with the half-up rule
- Summary counts, totals, ordering, and the "Unnamed" / "N/A" fallbacks
- Whole-document rejection on an unclassifiable feature
"""

from __future__ import annotations

import math

import pytest

from kml_viewer.activities.analyze_features import (
    InvalidFeature,
    UnsupportedGeometry,
    analyze_features,
    classify,
    compute_length,
    describe_feature,
    format_length,
    line_length,
)
from kml_viewer.models.analysis import DetailRow, SummaryResult
from kml_viewer.models.feature import Feature, FeatureCollection, Geometry


def _line(coords: list[tuple[float, float]], name: str | None = None) -> Feature:
    return Feature(geometry=Geometry(type="LineString", coordinates=coords), name=name)


def _multiline(lines: list[list[tuple[float, float]]], name: str | None = None) -> Feature:
    return Feature(geometry=Geometry(type="MultiLineString", coordinates=lines), name=name)


class TestClassify:
    """Geometry classifier."""

    def test_returns_tag_unmodified(self, right_angle_line: Feature) -> None:
        assert classify(right_angle_line) == "LineString"

    def test_no_case_folding(self) -> None:
        feature = Feature(geometry=Geometry(type="lineString", coordinates=[]))
        assert classify(feature) == "lineString"

    def test_unknown_type_passes_through(self) -> None:
        feature = Feature(geometry=Geometry(type="GeometryCollection"))
        assert classify(feature) == "GeometryCollection"

    def test_missing_geometry_raises(self) -> None:
        feature = Feature(geometry=None, name="Ghost", feature_index=3)
        with pytest.raises(InvalidFeature, match="Feature 3"):
            classify(feature)

    def test_empty_type_tag_raises(self) -> None:
        feature = Feature(geometry=Geometry(type="", coordinates=[]))
        with pytest.raises(InvalidFeature):
            classify(feature)

    def test_invalid_feature_taxonomy(self) -> None:
        err = InvalidFeature("x")
        assert err.category == "contract"
        assert err.stage == "analyze_features"
        assert err.code == "FEATURE_GEOMETRY_MISSING"
        assert err.retryable is False


class TestComputeLength:
    """Planar length calculator."""

    def test_right_angle_line(self, right_angle_line: Feature) -> None:
        assert compute_length(right_angle_line) == pytest.approx(7.0)

    def test_empty_line_is_zero(self) -> None:
        assert compute_length(_line([])) == 0.0

    def test_single_point_line_is_zero(self) -> None:
        assert compute_length(_line([(5.0, 5.0)])) == 0.0

    def test_diagonal_segment(self) -> None:
        assert compute_length(_line([(0.0, 0.0), (1.0, 1.0)])) == pytest.approx(math.sqrt(2))

    def test_reversed_line_has_same_length(self) -> None:
        coords = [(0.0, 0.0), (2.0, 1.0), (-1.0, 4.0), (3.0, 3.0)]
        forward = compute_length(_line(coords))
        backward = compute_length(_line(list(reversed(coords))))
        assert forward == pytest.approx(backward)

    def test_reordering_points_changes_length(self) -> None:
        """Length follows traversal order, not the point set."""
        in_order = compute_length(_line([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]))
        shuffled = compute_length(_line([(0.0, 0.0), (2.0, 0.0), (1.0, 0.0)]))
        assert in_order == pytest.approx(2.0)
        assert shuffled == pytest.approx(3.0)

    def test_multiline_sums_members(self) -> None:
        feature = _multiline([[(0.0, 0.0), (3.0, 0.0)], [(0.0, 0.0), (0.0, 4.0)]])
        assert compute_length(feature) == pytest.approx(7.0)

    def test_multiline_matches_separate_lines(self) -> None:
        a = [(0.0, 0.0), (1.0, 2.0), (4.0, 6.0)]
        b = [(10.0, 10.0), (10.0, 13.0)]
        separate = compute_length(_line(a)) + compute_length(_line(b))
        assert compute_length(_multiline([a, b])) == pytest.approx(separate)

    def test_multiline_without_members_is_zero(self) -> None:
        assert compute_length(_multiline([])) == 0.0

    def test_multiline_with_degenerate_members(self) -> None:
        feature = _multiline([[], [(1.0, 1.0)], [(0.0, 0.0), (0.0, 5.0)]])
        assert compute_length(feature) == pytest.approx(5.0)

    def test_point_is_unsupported(self, origin_point: Feature) -> None:
        with pytest.raises(UnsupportedGeometry, match="Point"):
            compute_length(origin_point)

    def test_polygon_is_unsupported(self) -> None:
        feature = Feature(
            geometry=Geometry(type="Polygon", coordinates=[[(0.0, 0.0), (1.0, 0.0), (0.0, 0.0)]])
        )
        with pytest.raises(UnsupportedGeometry):
            compute_length(feature)

    def test_missing_geometry_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedGeometry, match="missing"):
            compute_length(Feature(geometry=None))

    def test_unsupported_geometry_is_permanent(self) -> None:
        err = UnsupportedGeometry("x")
        assert err.category == "permanent"
        assert err.code == "UNSUPPORTED_GEOMETRY"

    def test_very_long_line_is_finite(self) -> None:
        assert compute_length(_line([(0.0, 0.0), (1e30, 0.0)])) == pytest.approx(1e30)

    def test_overflowing_length_is_unsupported(self) -> None:
        feature = _multiline([[(0.0, 0.0), (1.5e308, 0.0)], [(0.0, 0.0), (1.5e308, 0.0)]])
        with pytest.raises(UnsupportedGeometry, match="not finite") as exc_info:
            compute_length(feature)
        assert exc_info.value.code == "LENGTH_NOT_FINITE"

    def test_line_length_accepts_lists(self) -> None:
        assert line_length([[0, 0], [0, 3]]) == pytest.approx(3.0)


class TestFormatLength:
    """Two-decimal rendering, half-up on the exact binary value."""

    def test_integer_value(self) -> None:
        assert format_length(3) == "3.00"

    def test_seven(self) -> None:
        assert format_length(7.0) == "7.00"

    def test_zero(self) -> None:
        assert format_length(0.0) == "0.00"

    def test_2_005_is_below_the_tie(self) -> None:
        """2.005 is stored as 2.00499999..., so it rounds down."""
        assert format_length(2.005) == "2.00"

    def test_exact_binary_tie_rounds_up(self) -> None:
        assert format_length(0.125) == "0.13"

    def test_rounds_up_above_half(self) -> None:
        assert format_length(1.006) == "1.01"

    def test_irrational_length(self) -> None:
        assert format_length(math.sqrt(2)) == "1.41"

    def test_large_value(self) -> None:
        assert format_length(123456.789) == "123456.79"

    @pytest.mark.parametrize("value", [1e26, 1e27, 1e30, 1.7e308])
    def test_beyond_default_decimal_precision(self, value: float) -> None:
        assert format_length(value) == f"{int(value)}.00"


class TestDescribeFeature:
    """Single detail row construction."""

    def test_unnamed_line(self, right_angle_line: Feature) -> None:
        assert describe_feature(right_angle_line) == DetailRow(
            type="LineString", name="Unnamed", length="7.00"
        )

    def test_named_point(self, origin_point: Feature) -> None:
        assert describe_feature(origin_point) == DetailRow(
            type="Point", name="Origin", length="N/A"
        )

    def test_empty_name_falls_back(self) -> None:
        row = describe_feature(_line([(0.0, 0.0), (0.0, 1.0)], name=""))
        assert row.name == "Unnamed"

    def test_multiline_has_length(self) -> None:
        row = describe_feature(_multiline([[(0.0, 0.0), (0.0, 2.5)]], name="Fence"))
        assert row == DetailRow(type="MultiLineString", name="Fence", length="2.50")

    def test_polygon_is_not_applicable(self) -> None:
        feature = Feature(
            geometry=Geometry(type="MultiPolygon", coordinates=[]), name="Fields"
        )
        assert describe_feature(feature).length == "N/A"

    def test_lowercase_line_tag_is_not_measured(self) -> None:
        """Only the exact tags LineString / MultiLineString get a length."""
        feature = Feature(geometry=Geometry(type="linestring", coordinates=[(0, 0), (1, 0)]))
        assert describe_feature(feature).length == "N/A"


class TestAnalyzeFeatures:
    """Whole-collection analysis."""

    def test_single_unnamed_line(self, right_angle_line: Feature) -> None:
        analysis = analyze_features(FeatureCollection(features=(right_angle_line,)))
        assert analysis.details == (
            DetailRow(type="LineString", name="Unnamed", length="7.00"),
        )
        assert analysis.summary == SummaryResult(counts={"LineString": 1}, total=1)

    def test_point_and_line_summary(self, point_and_line: FeatureCollection) -> None:
        analysis = analyze_features(point_and_line)
        assert analysis.summary.counts == {"Point": 1, "LineString": 1}
        assert analysis.summary.total == 2

    def test_empty_collection(self) -> None:
        analysis = analyze_features(FeatureCollection())
        assert analysis.summary.counts == {}
        assert analysis.summary.total == 0
        assert analysis.details == ()

    def test_total_matches_input_and_counts(self) -> None:
        features = [
            Feature(geometry=Geometry(type="Point", coordinates=(0.0, 0.0))),
            _line([(0.0, 0.0), (1.0, 0.0)], name="a"),
            Feature(geometry=Geometry(type="Polygon", coordinates=[])),
            _line([(0.0, 0.0), (2.0, 0.0)], name="b"),
            Feature(geometry=Geometry(type="Point", coordinates=(1.0, 1.0))),
        ]
        analysis = analyze_features(features)
        assert analysis.summary.total == len(features)
        assert sum(analysis.summary.counts.values()) == analysis.summary.total
        assert len(analysis.details) == len(features)

    def test_counts_keep_first_seen_order(self) -> None:
        features = [
            _line([], name="x"),
            Feature(geometry=Geometry(type="Point", coordinates=(0.0, 0.0))),
            _line([], name="y"),
            Feature(geometry=Geometry(type="Polygon", coordinates=[])),
        ]
        counts = analyze_features(features).summary.counts
        assert list(counts) == ["LineString", "Point", "Polygon"]
        assert counts["LineString"] == 2

    def test_details_preserve_order(self) -> None:
        names = ["c", "a", "b"]
        features = [_line([(0.0, 0.0), (float(i), 0.0)], name=n) for i, n in enumerate(names)]
        analysis = analyze_features(features)
        assert [row.name for row in analysis.details] == names
        assert [row.length for row in analysis.details] == ["0.00", "1.00", "2.00"]

    def test_invalid_feature_rejects_whole_document(self, origin_point: Feature) -> None:
        features = [origin_point, Feature(geometry=None, feature_index=1), origin_point]
        with pytest.raises(InvalidFeature):
            analyze_features(features)

    def test_accepts_generator(self, origin_point: Feature) -> None:
        analysis = analyze_features(f for f in [origin_point, origin_point])
        assert analysis.summary.counts == {"Point": 2}
