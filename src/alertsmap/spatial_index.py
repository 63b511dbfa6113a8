"""Bulk-loaded R-tree over grid primitives."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from shapely.strtree import STRtree

from .geometry import Envelope, GeometryInput, GridGeom, decompose

_LOGGER = logging.getLogger("alertsmap.spatial_index")


class GridIndex:
    """Immutable envelope index answering "what overlaps this box" queries.

    Backed by shapely's Sort-Tile-Recursive tree, so a query costs
    O(log n + k) instead of a scan over every primitive.
    """

    def __init__(self, items: Sequence[GridGeom]) -> None:
        self._items: tuple[GridGeom, ...] = tuple(items)
        self._tree = STRtree([item.geom for item in self._items])
        self._envelope = _root_envelope(self._items)

    @classmethod
    def build(cls, items: Iterable[GridGeom]) -> GridIndex:
        index = cls(list(items))
        _LOGGER.debug("Built grid index with %d primitives, envelope=%s", len(index), index.envelope)
        return index

    @classmethod
    def from_geometries(
        cls,
        geometries: Iterable[GeometryInput],
        *,
        simplification: float,
        is_area: bool,
    ) -> GridIndex:
        items: list[GridGeom] = []
        for geometry in geometries:
            items.extend(decompose(geometry, simplification, is_area))
        return cls.build(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[GridGeom]:
        return iter(self._items)

    @property
    def envelope(self) -> Envelope | None:
        """Envelope bounding every non-empty primitive, None when there are none."""
        return self._envelope

    def query_intersecting(self, envelope: Envelope) -> Iterator[GridGeom]:
        """Lazily yield primitives whose envelope intersects ``envelope``."""
        if envelope.is_empty or not self._items:
            return iter(())
        hits = self._tree.query(envelope.to_geometry())
        return (self._items[idx] for idx in sorted(int(value) for value in hits))


def _root_envelope(items: Sequence[GridGeom]) -> Envelope | None:
    root: Envelope | None = None
    for item in items:
        env = item.envelope
        if env.is_empty:
            continue
        root = env if root is None else root.union(env)
    return root
