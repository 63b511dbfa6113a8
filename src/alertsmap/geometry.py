"""Grid primitives and geometry decomposition for the braille rasterizer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    box,
    shape,
)
from shapely.geometry.base import BaseGeometry
from simplification.cutil import simplify_coords_vw


@dataclass(frozen=True, slots=True)
class Envelope:
    """Axis-aligned bounding rectangle, the spatial index key."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_bounds(cls, bounds: Iterable[float]) -> Envelope:
        min_x, min_y, max_x, max_y = (float(value) for value in bounds)
        return cls(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)

    @classmethod
    def from_corners(cls, first: tuple[float, float], second: tuple[float, float]) -> Envelope:
        return cls(
            min_x=min(first[0], second[0]),
            min_y=min(first[1], second[1]),
            max_x=max(first[0], second[0]),
            max_y=max(first[1], second[1]),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        # shapely reports NaN bounds for empty geometries
        return any(math.isnan(value) for value in (self.min_x, self.min_y, self.max_x, self.max_y))

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def intersects(self, other: Envelope) -> bool:
        if self.is_empty or other.is_empty:
            return False
        return not (
            other.min_x > self.max_x
            or other.max_x < self.min_x
            or other.min_y > self.max_y
            or other.max_y < self.min_y
        )

    def contains(self, other: Envelope) -> bool:
        if self.is_empty or other.is_empty:
            return False
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and self.max_x >= other.max_x
            and self.max_y >= other.max_y
        )

    def union(self, other: Envelope) -> Envelope:
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        return Envelope(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y),
        )

    def padded(self, padding: float) -> Envelope:
        return Envelope(
            min_x=self.min_x - padding,
            min_y=self.min_y - padding,
            max_x=self.max_x + padding,
            max_y=self.max_y + padding,
        )

    def to_polygon(self) -> Polygon:
        return box(self.min_x, self.min_y, self.max_x, self.max_y)

    def to_geometry(self) -> BaseGeometry:
        """Smallest shapely geometry whose extent equals this envelope."""
        if self.width == 0 and self.height == 0:
            return Point(self.min_x, self.min_y)
        if self.width == 0 or self.height == 0:
            return LineString([(self.min_x, self.min_y), (self.max_x, self.max_y)])
        return self.to_polygon()


@dataclass(frozen=True, slots=True)
class Triangle:
    a: tuple[float, float]
    b: tuple[float, float]
    c: tuple[float, float]

    def to_polygon(self) -> Polygon:
        return Polygon([self.a, self.b, self.c, self.a])


def _envelope_of(geom: BaseGeometry) -> Envelope:
    return Envelope.from_bounds(geom.bounds)


@dataclass(frozen=True, slots=True)
class GridPoint:
    geom: Point

    @property
    def envelope(self) -> Envelope:
        return _envelope_of(self.geom)


@dataclass(frozen=True, slots=True)
class GridLine:
    """A single two-point segment."""

    geom: LineString

    @property
    def envelope(self) -> Envelope:
        return _envelope_of(self.geom)


@dataclass(frozen=True, slots=True)
class GridPolygon:
    """A whole polygon, produced only in area mode."""

    geom: Polygon

    @property
    def envelope(self) -> Envelope:
        return _envelope_of(self.geom)


GridGeom = Union[GridPoint, GridLine, GridPolygon]

GeometryInput = Union[BaseGeometry, Envelope, Triangle, Mapping[str, Any]]


def decompose(geometry: GeometryInput, simplification: float, is_area: bool) -> list[GridGeom]:
    """Split a geometry into indexable grid primitives.

    Lines and polygon rings are simplified by Visvalingam-Whyatt point
    removal with ``simplification`` as the smallest triangle area a vertex
    must span to survive (0 keeps every vertex). In outline mode (``is_area=False``)
    polygons contribute only the segments of their exterior ring, so holes are
    not drawn. In area mode they are kept whole.

    Input is not validated: empty or degenerate geometries pass through and
    may produce no primitives, or primitives with an empty envelope.
    """
    if isinstance(geometry, Mapping):
        geometry = shape(geometry)
    if isinstance(geometry, (Envelope, Triangle)):
        return decompose(geometry.to_polygon(), simplification, is_area)

    if isinstance(geometry, Point):
        return [GridPoint(geometry)]
    if isinstance(geometry, MultiPoint):
        return [GridPoint(point) for point in geometry.geoms]
    if isinstance(geometry, LineString):
        if len(geometry.coords) == 2:
            return [GridLine(geometry)]
        return _segments(_simplify(geometry, simplification))
    if isinstance(geometry, MultiLineString):
        out: list[GridGeom] = []
        for part in geometry.geoms:
            out.extend(_segments(_simplify(part, simplification)))
        return out
    if isinstance(geometry, (Polygon, MultiPolygon)):
        parts = _polygon_parts(_simplify(geometry, simplification))
        if is_area:
            return [GridPolygon(part) for part in parts]
        out = []
        for part in parts:
            out.extend(_segments(part.exterior))
        return out
    if isinstance(geometry, GeometryCollection):
        out = []
        for part in geometry.geoms:
            out.extend(decompose(part, simplification, is_area))
        return out
    raise TypeError(f"Unsupported geometry type for decomposition: {type(geometry).__name__}")


def _simplify(geom: BaseGeometry, tolerance: float) -> BaseGeometry:
    """Visvalingam-Whyatt reduction; ``tolerance`` is the minimum triangle area kept."""
    if tolerance <= 0 or geom.is_empty:
        return geom
    if isinstance(geom, LineString):
        return LineString(_simplify_coords(geom.coords, tolerance, 2))
    if isinstance(geom, Polygon):
        return Polygon(
            _simplify_coords(geom.exterior.coords, tolerance, 4),
            [_simplify_coords(ring.coords, tolerance, 4) for ring in geom.interiors],
        )
    if isinstance(geom, MultiPolygon):
        return MultiPolygon([_simplify(part, tolerance) for part in geom.geoms if not part.is_empty])
    raise TypeError(f"Cannot simplify {geom.geom_type}")


def _simplify_coords(
    coords: Iterable[tuple[float, ...]],
    tolerance: float,
    min_points: int,
) -> list[tuple[float, float]]:
    # A ring that would collapse below a valid ring keeps its vertices.
    original = [(float(c[0]), float(c[1])) for c in coords]
    simplified = simplify_coords_vw([list(point) for point in original], tolerance)
    if len(simplified) < min_points:
        return original
    return [(float(x), float(y)) for x, y in simplified]


def _polygon_parts(geom: BaseGeometry) -> list[Polygon]:
    if isinstance(geom, Polygon):
        return [geom]
    return [part for part in getattr(geom, "geoms", ()) if isinstance(part, Polygon)]


def _segments(line: LineString) -> list[GridGeom]:
    coords = list(line.coords)
    return [GridLine(LineString([start, end])) for start, end in zip(coords, coords[1:])]
