"""Braille rasterizer: spatial index -> grid of U+2800 dot-matrix glyphs."""

from __future__ import annotations

import logging
import math
import sys
from typing import Iterator, TextIO

from shapely.geometry import Polygon, box

from .geometry import Envelope, GridGeom, GridLine, GridPoint, GridPolygon
from .spatial_index import GridIndex

_LOGGER = logging.getLogger("alertsmap.grid")

CELL_ROWS = 4
CELL_COLS = 2
BRAILLE_OFFSET = 0x2800
EMPTY_GLYPH = chr(BRAILLE_OFFSET)

# Unicode braille dot numbering, (row, col) within a 4x2 cell:
#   1   8
#   2  16
#   4  32
#  64 128
_BRAILLE_DOTS: dict[tuple[int, int], int] = {
    (0, 0): 0x01,
    (0, 1): 0x08,
    (1, 0): 0x02,
    (1, 1): 0x10,
    (2, 0): 0x04,
    (2, 1): 0x20,
    (3, 0): 0x40,
    (3, 1): 0x80,
}


class GridRenderError(RuntimeError):
    """Raised when a rendered grid line cannot be written."""


def braille_cell_value(row: int, col: int) -> int:
    """Bit for the dot at (row, col) of a braille cell; 0 outside the cell."""
    return _BRAILLE_DOTS.get((row, col), 0x00)


def braille_char(value: int) -> str:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Braille cell value out of range: {value}")
    return chr(BRAILLE_OFFSET + value)


def fit_to_aspect_ratio(width: float, height: float, box_aspect_ratio: float) -> tuple[float, float]:
    """Return the (cols, rows) the geometry box occupies on a width x height terminal.

    Terminal cells are about twice as tall as they are wide, hence the 2.0 factor.
    """
    term_aspect_ratio = width / height
    if term_aspect_ratio > 1.0 and box_aspect_ratio > 2.0 and term_aspect_ratio > box_aspect_ratio * 2.0:
        return height * box_aspect_ratio * 2.0, height
    return width, (width / box_aspect_ratio) / 2.0


def cell_bounds(
    row: int,
    col: int,
    start_x: float,
    start_y: float,
    cell_size: tuple[float, float],
) -> Envelope:
    """Envelope of cell (row, col) counted right and down from (start_x, start_y)."""
    min_x = start_x + cell_size[0] * col
    max_y = start_y - cell_size[1] * row
    return Envelope(
        min_x=min_x,
        min_y=max_y - cell_size[1],
        max_x=min_x + cell_size[0],
        max_y=max_y,
    )


def _occupies(cell: Polygon, item: GridGeom) -> bool:
    if isinstance(item, GridPoint):
        return cell.contains(item.geom)
    if isinstance(item, GridLine):
        return cell.intersects(item.geom)
    if isinstance(item, GridPolygon):
        return cell.intersects(item.geom)
    raise TypeError(f"Unknown grid primitive: {type(item).__name__}")


class MapGrid:
    """Fixed-size braille grid over the extent of a prebuilt ``GridIndex``.

    The grid always has ``ceil(height)`` rows and ``ceil(width)`` columns.
    Cell size is derived from the aspect-ratio-corrected fit of the index
    envelope, so the shape keeps its proportions and may leave part of the
    grid blank. Nothing is cached between render passes.
    """

    __slots__ = ("_rows", "_cols", "_bbox", "_cell_size", "_inner_cell_size", "_index")

    def __init__(self, width: float, height: float, index: GridIndex) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        bbox = index.envelope
        if bbox is None:
            raise ValueError("Cannot rasterize an empty index")
        box_width = bbox.width
        box_height = bbox.height
        if box_width <= 0 or box_height <= 0:
            raise ValueError(
                f"Index envelope has no area ({box_width}x{box_height}); aspect ratio is undefined"
            )

        cols_f, rows_f = fit_to_aspect_ratio(width, height, box_width / box_height)
        cell_width = box_width / cols_f
        cell_height = box_height / rows_f

        self._rows = math.ceil(height)
        self._cols = math.ceil(width)
        self._bbox = bbox
        self._cell_size = (cell_width, cell_height)
        self._inner_cell_size = (cell_width / CELL_COLS, cell_height / CELL_ROWS)
        self._index = index
        _LOGGER.debug(
            "Map grid %dx%d over %s, cell size=%s",
            self._cols,
            self._rows,
            bbox,
            self._cell_size,
        )

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def bbox(self) -> Envelope:
        return self._bbox

    @property
    def cell_size(self) -> tuple[float, float]:
        return self._cell_size

    @property
    def inner_cell_size(self) -> tuple[float, float]:
        return self._inner_cell_size

    def cell_origin(self, row: int, col: int) -> tuple[float, float]:
        """Top-left corner of outer cell (row, col) in geometry coordinates."""
        return (
            self._bbox.min_x + self._cell_size[0] * col,
            self._bbox.max_y - self._cell_size[1] * row,
        )

    def cell_intersects(self, envelope: Envelope) -> bool:
        cell = box(envelope.min_x, envelope.min_y, envelope.max_x, envelope.max_y)
        return any(_occupies(cell, item) for item in self._index.query_intersecting(envelope))

    def cell_value(self, row: int, col: int) -> int:
        """Braille bit mask for outer cell (row, col)."""
        outer = cell_bounds(row, col, self._bbox.min_x, self._bbox.max_y, self._cell_size)
        if not self.cell_intersects(outer):
            return 0x00

        start_x, start_y = self.cell_origin(row, col)
        value = 0x00
        for r in range(CELL_ROWS):
            for c in range(CELL_COLS):
                inner = cell_bounds(r, c, start_x, start_y, self._inner_cell_size)
                if self.cell_intersects(inner):
                    value |= braille_cell_value(r, c)
        return value

    def rows_text(self) -> Iterator[str]:
        """Yield the grid one line at a time, top row first, without newlines."""
        for row in range(self._rows):
            yield "".join(braille_char(self.cell_value(row, col)) for col in range(self._cols))

    def render_text(self) -> str:
        return "".join(f"{line}\n" for line in self.rows_text())

    def render(self, stream: TextIO | None = None) -> None:
        """Write every grid line to ``stream`` (stdout by default), flushing once at the end."""
        out = stream if stream is not None else sys.stdout
        for line_no, line in enumerate(self.rows_text()):
            try:
                out.write(f"{line}\n")
            except (OSError, ValueError) as exc:
                raise GridRenderError(f"Error printing grid line {line_no}") from exc
        try:
            out.flush()
        except (OSError, ValueError) as exc:
            raise GridRenderError(f"Error flushing grid output after {self._rows} lines") from exc
