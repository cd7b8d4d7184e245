"""Data model for converted KML features.

A Feature is one Placemark converted into a GeoJSON-shaped record:
a tagged geometry plus the Placemark's name, description, and
ExtendedData. A FeatureCollection keeps the features in document
order. This is the output of the convert_kml activity and the input
to the analyze_features activity; ``to_dict()`` produces the GeoJSON
handed to the map display unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class Geometry:
    """A GeoJSON geometry.

    Attributes:
        type: GeoJSON geometry type (e.g. ``"Point"``, ``"LineString"``,
            ``"MultiPolygon"``, ``"GeometryCollection"``).
        coordinates: Type-dependent nesting of ``(lon, lat)`` tuples:
            a single tuple for ``Point``, a list of tuples for
            ``LineString``, a list of rings for ``Polygon``, and one more
            level of nesting for each ``Multi*`` type. Empty for
            ``GeometryCollection``.
        geometries: Member geometries, only used by ``GeometryCollection``.
    """

    type: str
    coordinates: Any = field(default_factory=list)
    geometries: tuple[Geometry, ...] = ()

    def to_dict(self) -> dict[str, object]:
        """Serialise to a GeoJSON geometry object."""
        if self.type == "GeometryCollection":
            return {
                "type": self.type,
                "geometries": [g.to_dict() for g in self.geometries],
            }
        return {"type": self.type, "coordinates": _coords_to_lists(self.coordinates)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Geometry:
        """Deserialise from a GeoJSON geometry object.

        Raises:
            TypeError: If ``geometries`` is present but not a list.
        """
        members_raw = data.get("geometries", [])
        if not isinstance(members_raw, list):
            msg = f"geometries must be a list, got {type(members_raw).__name__}"
            raise TypeError(msg)
        return cls(
            type=str(data.get("type", "") or ""),
            coordinates=_coords_to_tuples(data.get("coordinates", [])),
            geometries=tuple(cls.from_dict(g) for g in members_raw),
        )


@dataclass(frozen=True, slots=True)
class Feature:
    """A single Placemark converted from a KML document.

    Attributes:
        geometry: The Placemark geometry, or ``None`` when the record
            carries none (only possible for hand-built or deserialised
            features; the converter never emits one).
        name: Placemark name, or ``None`` when absent or blank.
        description: Placemark description text.
        properties: Key-value pairs from ``ExtendedData``.
        feature_index: Zero-based position of the Placemark in the document.
    """

    geometry: Geometry | None
    name: str | None = None
    description: str = ""
    properties: dict[str, str] = field(default_factory=dict)
    feature_index: int = 0

    @property
    def geometry_type(self) -> str | None:
        """The geometry's type tag, or ``None`` if there is no geometry."""
        if self.geometry is None:
            return None
        return self.geometry.type or None

    @property
    def coordinates(self) -> Any:
        """The geometry's coordinates (empty list if there is no geometry)."""
        if self.geometry is None:
            return []
        return self.geometry.coordinates

    def to_dict(self) -> dict[str, object]:
        """Serialise to a GeoJSON Feature object."""
        properties: dict[str, object] = {}
        if self.name is not None:
            properties["name"] = self.name
        if self.description:
            properties["description"] = self.description
        properties.update(self.properties)
        return {
            "type": "Feature",
            "geometry": self.geometry.to_dict() if self.geometry is not None else None,
            "properties": properties,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, feature_index: int = 0) -> Feature:
        """Deserialise from a GeoJSON Feature object.

        A missing or ``null`` geometry is kept as ``None`` rather than
        guessed; the analyzer rejects such features.

        Raises:
            TypeError: If ``geometry`` or ``properties`` have unexpected types.
        """
        geometry_raw = data.get("geometry")
        if geometry_raw is not None and not isinstance(geometry_raw, dict):
            msg = f"geometry must be a dict, got {type(geometry_raw).__name__}"
            raise TypeError(msg)

        props_raw = data.get("properties") or {}
        if not isinstance(props_raw, dict):
            msg = f"properties must be a dict, got {type(props_raw).__name__}"
            raise TypeError(msg)

        name_raw = props_raw.get("name")
        name = str(name_raw) if name_raw is not None else None

        return cls(
            geometry=Geometry.from_dict(geometry_raw) if geometry_raw is not None else None,
            name=name,
            description=str(props_raw.get("description", "") or ""),
            properties={
                str(k): str(v)
                for k, v in props_raw.items()
                if k not in ("name", "description") and v is not None
            },
            feature_index=feature_index,
        )


@dataclass(frozen=True, slots=True)
class FeatureCollection:
    """Ordered features converted from one KML document.

    Attributes:
        features: Features in document order.
        source_file: Name of the uploaded file the features came from.
    """

    features: tuple[Feature, ...] = ()
    source_file: str = ""

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a GeoJSON FeatureCollection for map display."""
        return {
            "type": "FeatureCollection",
            "features": [f.to_dict() for f in self.features],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, source_file: str = "") -> FeatureCollection:
        """Deserialise from a GeoJSON FeatureCollection object.

        Raises:
            TypeError: If ``features`` is not a list.
        """
        features_raw = data.get("features", [])
        if not isinstance(features_raw, list):
            msg = f"features must be a list, got {type(features_raw).__name__}"
            raise TypeError(msg)
        return cls(
            features=tuple(
                Feature.from_dict(f, feature_index=idx) for idx, f in enumerate(features_raw)
            ),
            source_file=source_file,
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _coords_to_lists(coords: Any) -> Any:
    """Convert nested coordinate tuples to JSON-friendly nested lists."""
    if isinstance(coords, list | tuple):
        return [_coords_to_lists(c) for c in coords]
    return coords


def _coords_to_tuples(coords: Any) -> Any:
    """Convert nested GeoJSON coordinate lists into ``(lon, lat)`` tuples.

    The innermost level (a list of numbers) becomes a tuple; altitude is
    dropped.
    """
    if not isinstance(coords, list | tuple):
        return coords
    if coords and all(isinstance(c, int | float) for c in coords):
        return tuple(float(c) for c in coords[:2])
    return [_coords_to_tuples(c) for c in coords]
