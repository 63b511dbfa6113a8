"""Reference data records shared across the map modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

from .geometry import Envelope

# ([min_x, max_x], [min_y, max_y])
XYBounds = tuple[list[float], list[float]]

VIEWPORT_PADDING = 0.5


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass but never a valid id
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected integer for '{field_name}'")
    return value


def _require_area_geometry(value: Any, field_name: str) -> Polygon | MultiPolygon:
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected GeoJSON geometry mapping for '{field_name}'")
    try:
        geom = shape(value)
    except (KeyError, TypeError, ValueError, AttributeError, ShapelyError) as exc:
        raise ValueError(f"Invalid GeoJSON geometry for '{field_name}': {exc}") from exc
    if not isinstance(geom, (Polygon, MultiPolygon)):
        raise ValueError(f"Expected Polygon or MultiPolygon for '{field_name}', got {geom.geom_type}")
    if geom.is_empty:
        raise ValueError(f"Empty geometry for '{field_name}'")
    return geom


def padded_bounds(envelope: Envelope, padding: float = VIEWPORT_PADDING) -> XYBounds:
    return (
        [envelope.min_x - padding, envelope.max_x + padding],
        [envelope.min_y - padding, envelope.max_y + padding],
    )


@dataclass(frozen=True, slots=True)
class Region:
    """Administrative region (oblast) of the country.

    ``id`` is the 1-based position in the canonical collated order and is
    assigned by the directory; ``location_uid`` is the id the alerts feed uses.
    """

    id: int
    relation_id: str
    location_uid: int
    geometry: BaseGeometry
    name: str
    name_en: str
    location_type: str | None = None

    @classmethod
    def from_feature(cls, feature: Mapping[str, Any], *, region_id: int = 0) -> Region:
        """Build a region from a GeoJSON feature; any bad field raises ``ValueError``."""
        props = feature.get("properties")
        if not isinstance(props, Mapping):
            raise ValueError("Expected mapping for 'properties'")
        location_type_raw = props.get("place")
        return cls(
            id=region_id,
            relation_id=_require_str(props.get("@id"), "@id"),
            location_uid=_require_int(props.get("@location_uid"), "@location_uid"),
            geometry=_require_area_geometry(feature.get("geometry"), "geometry"),
            name=_require_str(props.get("name"), "name"),
            name_en=_require_str(props.get("name:en"), "name:en"),
            location_type=(
                _require_str(location_type_raw, "place") if location_type_raw is not None else None
            ),
        )

    @property
    def bounding_rect(self) -> Envelope:
        return Envelope.from_bounds(self.geometry.bounds)

    @property
    def center(self) -> tuple[float, float]:
        return self.bounding_rect.center

    @property
    def boundary(self) -> Polygon:
        """The region polygon; the largest part when the region is a multipolygon."""
        if isinstance(self.geometry, Polygon):
            return self.geometry
        return max(self.geometry.geoms, key=lambda part: part.area)

    def get_x_y_bounds(self) -> XYBounds:
        return padded_bounds(self.bounding_rect)

    def name_by_locale(self, locale: str) -> str:
        return self.name_en if locale.casefold().startswith("en") else self.name

    def matches_name(self, name: str) -> bool:
        needle = name.strip().casefold()
        return needle in (self.name.casefold(), self.name_en.casefold())
