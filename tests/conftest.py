"""Shared pytest fixtures for the KML Viewer test suite."""

from pathlib import Path

import pytest

from kml_viewer.core.config import ViewerConfig
from kml_viewer.models.feature import Feature, FeatureCollection, Geometry

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"
EDGE_CASES_DIR = DATA_DIR / "edge_cases"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def edge_cases_dir() -> Path:
    """Return the path to the edge-cases test data directory."""
    return EDGE_CASES_DIR


# ---------------------------------------------------------------------------
# Sample KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def trail_network_kml(data_dir: Path) -> Path:
    """Point, named LineString, Polygon with hole, unnamed LineString."""
    return data_dir / "01_trail_network.kml"


@pytest.fixture()
def multigeometry_kml(data_dir: Path) -> Path:
    """MultiGeometry placemarks: lines, mixed, polygons, single member."""
    return data_dir / "02_multigeometry.kml"


@pytest.fixture()
def nested_folders_kml(data_dir: Path) -> Path:
    """Placemarks spread over nested Folder elements."""
    return data_dir / "03_nested_folders.kml"


@pytest.fixture()
def gx_tracks_kml(data_dir: Path) -> Path:
    """gx:Track and gx:MultiTrack placemarks."""
    return data_dir / "04_gx_tracks.kml"


@pytest.fixture()
def extended_data_kml(data_dir: Path) -> Path:
    """Placemark with Data and SchemaData metadata."""
    return data_dir / "05_extended_data.kml"


# ---------------------------------------------------------------------------
# Edge-case KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def not_xml_kml(edge_cases_dir: Path) -> Path:
    """Path to a file that is not valid XML."""
    return edge_cases_dir / "11_malformed_not_xml.kml"


@pytest.fixture()
def unclosed_tags_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML file with an unclosed element."""
    return edge_cases_dir / "12_malformed_unclosed_tags.kml"


@pytest.fixture()
def empty_kml(edge_cases_dir: Path) -> Path:
    """Path to a valid KML with no features."""
    return edge_cases_dir / "13_empty_no_features.kml"


@pytest.fixture()
def no_geometry_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML where two of three Placemarks carry no usable geometry."""
    return edge_cases_dir / "14_placemark_without_geometry.kml"


@pytest.fixture()
def not_kml_root_kml(edge_cases_dir: Path) -> Path:
    """Path to well-formed XML whose root is not <kml>."""
    return edge_cases_dir / "15_not_kml_root.kml"


@pytest.fixture()
def kml21_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML 2.1 (earth.google.com namespace) document."""
    return edge_cases_dir / "16_kml21_namespace.kml"


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> ViewerConfig:
    """Default viewer configuration."""
    return ViewerConfig()


@pytest.fixture()
def right_angle_line() -> Feature:
    """Unnamed LineString (0,0) -> (3,0) -> (3,4), planar length 7."""
    return Feature(
        geometry=Geometry(type="LineString", coordinates=[(0.0, 0.0), (3.0, 0.0), (3.0, 4.0)]),
    )


@pytest.fixture()
def origin_point() -> Feature:
    """Named Point at the origin."""
    return Feature(geometry=Geometry(type="Point", coordinates=(0.0, 0.0)), name="Origin")


@pytest.fixture()
def point_and_line(origin_point: Feature, right_angle_line: Feature) -> FeatureCollection:
    """Collection with one Point followed by one LineString."""
    return FeatureCollection(features=(origin_point, right_angle_line))
