"""Geographic reference directory: country border, bounding box, and regions."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping, Sequence

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from .collation import sort_by_locale
from .geometry import Envelope
from .models import VIEWPORT_PADDING, Region, XYBounds, padded_bounds

_LOGGER = logging.getLogger("alertsmap.directory")

BORDERS_ASSET = "ukraine.wkt"
REGIONS_ASSET = "regions.geojson"

# 44°23'..52°25' N, 22°08'..40°13' E
BOUNDING_BOX = Envelope(min_x=22.08, min_y=44.23, max_x=40.13, max_y=52.25)
COUNTRY_CENTER = (31.02, 49.01)

COLLATION_LOCALE = "uk"

# Region uids in the positional order of the alerts feed status string.
STATUS_ORDER_UIDS: tuple[int, ...] = (
    29, 4, 8, 9, 28, 10, 11, 12, 13, 31, 14, 15, 16, 27,
    17, 18, 19, 5, 30, 20, 21, 22, 23, 3, 24, 26, 25,
)
REGION_COUNT = len(STATUS_ORDER_UIDS)


class GeoDataError(ValueError):
    """Embedded geographic data is malformed or inconsistent."""


def read_asset(name: str) -> str:
    return (resources.files("alertsmap") / "data" / name).read_text(encoding="utf-8")


def parse_borders(text: str) -> Polygon:
    try:
        geom = wkt.loads(text)
    except (ShapelyError, ValueError) as exc:
        raise GeoDataError(f"Invalid country border WKT: {exc}") from exc
    if not isinstance(geom, Polygon) or geom.is_empty:
        raise GeoDataError(f"Country border must be a non-empty Polygon, got {geom.geom_type}")
    return geom


def parse_regions(payload: str | Mapping[str, Any]) -> list[Region]:
    """Parse a GeoJSON FeatureCollection into regions in file order."""
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise GeoDataError(f"Invalid regions GeoJSON: {exc}") from exc
    if not isinstance(payload, Mapping) or payload.get("type") != "FeatureCollection":
        raise GeoDataError("Regions data must be a GeoJSON FeatureCollection")
    features = payload.get("features")
    if not isinstance(features, list):
        raise GeoDataError("Expected list for 'features'")

    regions: list[Region] = []
    seen_uids: set[int] = set()
    for idx, feature in enumerate(features):
        if not isinstance(feature, Mapping):
            raise GeoDataError(f"Expected mapping at features[{idx}]")
        try:
            region = Region.from_feature(feature)
        except ValueError as exc:
            raise GeoDataError(f"Invalid region at features[{idx}]: {exc}") from exc
        if region.location_uid in seen_uids:
            raise GeoDataError(f"Duplicate location uid {region.location_uid} at features[{idx}]")
        seen_uids.add(region.location_uid)
        regions.append(region)
    return regions


def _check_canonical_order(regions: Sequence[Region], expected_uids: Sequence[int]) -> None:
    if len(regions) != len(expected_uids):
        raise GeoDataError(f"Expected {len(expected_uids)} regions, found {len(regions)}")
    actual = tuple(region.location_uid for region in regions)
    if actual != tuple(expected_uids):
        mismatches = [
            f"#{pos}: uid {got} (expected {want})"
            for pos, (got, want) in enumerate(zip(actual, expected_uids))
            if got != want
        ]
        raise GeoDataError(
            "Collated region order disagrees with the status feed order: " + ", ".join(mismatches)
        )


class GeoDirectory:
    """Owner of the immutable country reference data.

    Regions are sorted once by collated Ukrainian name and numbered 1..N in
    that order. The order doubles as the positional key of the alerts feed's
    status string, so construction fails when it disagrees with
    ``expected_order`` (pass None to skip the check, e.g. for partial data).
    """

    def __init__(
        self,
        borders: Polygon,
        regions: Sequence[Region],
        *,
        bounding_box: Envelope = BOUNDING_BOX,
        expected_order: Sequence[int] | None = STATUS_ORDER_UIDS,
    ) -> None:
        ordered = list(regions)
        sort_by_locale(ordered, key=lambda region: region.name, locale=COLLATION_LOCALE)
        numbered = tuple(replace(region, id=pos) for pos, region in enumerate(ordered, start=1))
        if expected_order is not None:
            _check_canonical_order(numbered, expected_order)
        self._borders = borders
        self._bounding_box = bounding_box
        self._regions = numbered
        _LOGGER.debug("Geo directory ready with %d regions", len(numbered))

    @classmethod
    def from_sources(
        cls,
        borders_wkt: str,
        regions_geojson: str | Mapping[str, Any],
        **kwargs: Any,
    ) -> GeoDirectory:
        return cls(parse_borders(borders_wkt), parse_regions(regions_geojson), **kwargs)

    @classmethod
    def from_assets(cls) -> GeoDirectory:
        return cls.from_sources(read_asset(BORDERS_ASSET), read_asset(REGIONS_ASSET))

    @property
    def borders(self) -> Polygon:
        return self._borders

    @property
    def bounding_box(self) -> Envelope:
        return self._bounding_box

    @property
    def center(self) -> tuple[float, float]:
        return COUNTRY_CENTER

    @property
    def regions(self) -> tuple[Region, ...]:
        return self._regions

    def __len__(self) -> int:
        return len(self._regions)

    def get_region_by_id(self, region_id: int) -> Region | None:
        for region in self._regions:
            if region.id == region_id:
                return region
        return None

    def get_region_by_uid(self, location_uid: int) -> Region | None:
        for region in self._regions:
            if region.location_uid == location_uid:
                return region
        return None

    def get_region_by_name(self, name: str) -> Region | None:
        """Match either locale's name, ignoring case."""
        for region in self._regions:
            if region.matches_name(name):
                return region
        return None

    def get_viewport_bounds(
        self,
        geometry: BaseGeometry | str | None = None,
        padding: float = VIEWPORT_PADDING,
    ) -> XYBounds:
        """Padded x/y bounds of the country box, or of ``geometry`` when given.

        ``geometry`` may be a shapely geometry or a WKT string.
        """
        bbox = self._bounding_box
        if geometry is not None:
            geom = wkt.loads(geometry) if isinstance(geometry, str) else geometry
            if geom.is_empty:
                raise ValueError("Cannot compute viewport bounds of an empty geometry")
            bbox = Envelope.from_bounds(geom.bounds)
        return padded_bounds(bbox, padding)


@lru_cache(maxsize=1)
def default_directory() -> GeoDirectory:
    """Process-wide directory built from the embedded assets on first use."""
    directory = GeoDirectory.from_assets()
    _LOGGER.info("Loaded %d regions from embedded assets", len(directory))
    return directory
