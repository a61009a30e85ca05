"""
Shape layout for dotted QR codes.

A QR module grid is turned into a flat list of drawable shape descriptors.
Data modules become circles, the three finder-pattern corners become
squares, and a square of modules in the middle of the grid is left out
so an overlay image can be placed there. A single background plate that
covers the whole grid is emitted first.

Coordinates are expressed in the same units as ``block_size`` with the
origin at the visual center of the grid and y pointing up, so row 0 is
at the top and column 0 at the left.

Classes
-------
ModuleGrid
    Immutable boolean module matrix.
LayoutParams
    Immutable layout configuration.
ShapeDescriptor
    One drawable shape.

Functions
---------
generate_layout
    Map a ModuleGrid to a list of ShapeDescriptor.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

import numpy as np


logger = logging.getLogger(__name__)

Point = tuple[float, float]  # (x, y)
GridLike = Union[np.ndarray, Sequence[Sequence[bool]]]


class ShapeKind(Enum):
    CIRCLE = "circle"
    SQUARE = "square"


class ShapeColor(Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"


# Depth of the background plate; module shapes are drawn at MODULE_DEPTH.
PLATE_DEPTH = -1
MODULE_DEPTH = 0


class ModuleGrid:
    """
    Immutable QR module grid.

    Parameters
    ----------
    modules : numpy.ndarray or sequence of sequences of bool
        Rows of the grid. True indicates a dark module.

    Attributes
    ----------
    matrix : numpy.ndarray
        Read-only boolean array of shape (height, width).
    width : int
        Number of modules per row.
    height : int
        Number of rows.

    Raises
    ------
    ValueError
        If the grid is empty or its rows have different lengths.
    """

    def __init__(self, modules: GridLike) -> None:
        if isinstance(modules, np.ndarray):
            matrix = modules.astype(bool)
        else:
            rows = [list(row) for row in modules]
            if rows and len({len(row) for row in rows}) != 1:
                raise ValueError("all grid rows must have the same length")
            matrix = np.array(rows, dtype=bool)

        if matrix.ndim != 2:
            raise ValueError(
                f"grid must be two-dimensional; got shape {matrix.shape}"
            )
        if matrix.shape[0] < 1 or matrix.shape[1] < 1:
            raise ValueError("grid must have at least one row and one column")

        matrix.flags.writeable = False
        self._matrix = matrix

    @classmethod
    def from_text(cls, pattern: str, *, dark: str = "#") -> "ModuleGrid":
        """
        Parse a character rendering of a QR code.

        Each line of `pattern` is one row; `dark` marks a dark module and
        any other character a light one. Blank lines are ignored.
        """
        lines = [line for line in pattern.splitlines() if line]
        return cls([[ch == dark for ch in line] for line in lines])

    def to_text(self, *, dark: str = "#", light: str = " ") -> str:
        return "\n".join(
            "".join(dark if cell else light for cell in row)
            for row in self._matrix
        )

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def width(self) -> int:
        return int(self._matrix.shape[1])

    @property
    def height(self) -> int:
        return int(self._matrix.shape[0])

    def is_dark(self, row: int, col: int) -> bool:
        return bool(self._matrix[row, col])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleGrid):
            return NotImplemented
        return np.array_equal(self._matrix, other._matrix)

    def __hash__(self) -> int:
        return hash((self._matrix.shape, self._matrix.tobytes()))

    def __repr__(self) -> str:
        return f"ModuleGrid(width={self.width}, height={self.height})"


def _positive_real(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        raise TypeError(f"'{name}' must be a real number")
    if not (value > 0 and math.isfinite(value)):
        raise ValueError(f"'{name}' must be a positive number")
    return float(value)


@dataclass(frozen=True)
class LayoutParams:
    """
    Immutable layout configuration.

    Parameters
    ----------
    block_size : float, optional
        Distance between adjacent module centers. Circles use it as their
        diameter and squares as their edge length. The default is 10.
    corner_marker_size : int, optional
        Edge length, in modules, of the three corner zones drawn as
        squares. The default is 7, the size of a QR finder pattern.
    center_exclusion_size : float, optional
        Edge length, in pixels, of the blank central zone reserved for
        an overlay image. It is converted to a module count by dividing
        by `block_size`. The default is 70.

    Raises
    ------
    TypeError
        If `corner_marker_size` is not an integer, or a size is a bool
        or not a number.
    ValueError
        If any size is not strictly positive.
    """

    block_size: float = 10.0
    corner_marker_size: int = 7
    center_exclusion_size: float = 70.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "block_size", _positive_real(self.block_size, "block_size")
        )
        if isinstance(self.corner_marker_size, bool) or not isinstance(
            self.corner_marker_size, (int, np.integer)
        ):
            raise TypeError("'corner_marker_size' must be an integer")
        if self.corner_marker_size <= 0:
            raise ValueError("'corner_marker_size' must be positive")
        object.__setattr__(self, "corner_marker_size", int(self.corner_marker_size))
        object.__setattr__(
            self,
            "center_exclusion_size",
            _positive_real(self.center_exclusion_size, "center_exclusion_size"),
        )

    @property
    def center_span(self) -> int:
        """Number of modules covered by the center exclusion zone per side."""
        return int(self.center_exclusion_size // self.block_size)


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    A drawable shape produced by the layout.

    Attributes
    ----------
    kind : ShapeKind
        Circle for data modules, square for corner modules and the
        background plate.
    color : ShapeColor
        Foreground for dark modules, background otherwise.
    center : tuple of float
        Center position (x, y) relative to the grid's visual center.
    size : tuple of float
        Width and height of the shape's bounding box.
    depth : int
        Drawing order; lower depths are drawn first.
    """

    kind: ShapeKind
    color: ShapeColor
    center: Point
    size: tuple[float, float]
    depth: int = MODULE_DEPTH


@dataclass(frozen=True)
class CellRange:
    """Half-open band of rows [top, bottom) and columns [left, right)."""

    top: int
    bottom: int
    left: int
    right: int

    def contains(self, row: int, col: int) -> bool:
        return self.top <= row < self.bottom and self.left <= col < self.right

    @property
    def cell_count(self) -> int:
        return max(0, self.bottom - self.top) * max(0, self.right - self.left)


def _clip(start: int, stop: int, limit: int) -> tuple[int, int]:
    return max(0, start), min(limit, stop)


def layout_extent(grid: ModuleGrid, params: LayoutParams) -> tuple[float, float]:
    """Total (width, height) covered by the grid."""
    return grid.width * params.block_size, grid.height * params.block_size


def cell_center(
    row: int,
    col: int,
    grid: ModuleGrid,
    params: LayoutParams,
) -> Point:
    """
    Position of a module in layout coordinates.

    Column 0 sits at the left edge of the background plate and row 0 at
    its top edge; x grows with the column and y shrinks with the row.
    """
    total_width, total_height = layout_extent(grid, params)
    offset_x = -total_width / 2.0
    offset_y = total_height / 2.0
    return (
        offset_x + col * params.block_size,
        offset_y - row * params.block_size,
    )


def center_exclusion_zone(grid: ModuleGrid, params: LayoutParams) -> CellRange:
    """
    Cells left blank for the center overlay.

    The zone spans ``center_exclusion_size // block_size`` modules in each
    direction and is centered on the middle module of the grid. It is
    clipped to the grid when the span exceeds the grid size.
    """
    span = params.center_span
    left, right = _clip(
        grid.width // 2 - span // 2,
        grid.width // 2 - span // 2 + span,
        grid.width,
    )
    top, bottom = _clip(
        grid.height // 2 - span // 2,
        grid.height // 2 - span // 2 + span,
        grid.height,
    )
    return CellRange(top=top, bottom=bottom, left=left, right=right)


def corner_zones(grid: ModuleGrid, params: LayoutParams) -> tuple[CellRange, ...]:
    """
    The three finder-pattern zones: top-left, top-right and bottom-left.

    QR codes carry no finder pattern in the bottom-right corner, so there
    is no zone for it. Zones larger than half the grid overlap; this is
    not an error.
    """
    size = params.corner_marker_size
    first_rows = _clip(0, size, grid.height)
    last_rows = _clip(grid.height - size, grid.height, grid.height)
    first_cols = _clip(0, size, grid.width)
    last_cols = _clip(grid.width - size, grid.width, grid.width)
    return (
        CellRange(*first_rows, *first_cols),
        CellRange(*first_rows, *last_cols),
        CellRange(*last_rows, *first_cols),
    )


def _zone_mask(grid: ModuleGrid, zones: Sequence[CellRange]) -> np.ndarray:
    mask = np.zeros(grid.matrix.shape, dtype=bool)
    for zone in zones:
        mask[zone.top:zone.bottom, zone.left:zone.right] = True
    return mask


def background_plate(grid: ModuleGrid, params: LayoutParams) -> ShapeDescriptor:
    """Square covering the whole grid, drawn behind every module."""
    return ShapeDescriptor(
        kind=ShapeKind.SQUARE,
        color=ShapeColor.BACKGROUND,
        center=(0.0, 0.0),
        size=layout_extent(grid, params),
        depth=PLATE_DEPTH,
    )


def generate_layout(
    grid: ModuleGrid,
    params: LayoutParams,
) -> list[ShapeDescriptor]:
    """
    Map a module grid to drawable shapes.

    Parameters
    ----------
    grid : ModuleGrid
        QR module grid.
    params : LayoutParams
        Block size, corner marker size and center exclusion size.

    Returns
    -------
    list of ShapeDescriptor
        The background plate followed by one descriptor per cell outside
        the center exclusion zone, in row-major order.

    Notes
    -----
    Cells inside a corner zone are squares and all other cells circles.
    The color only depends on whether the module is dark, so the number
    of shapes depends on the grid size and parameters alone.
    """
    center_zone = center_exclusion_zone(grid, params)
    excluded = _zone_mask(grid, [center_zone])
    corners = _zone_mask(grid, corner_zones(grid, params))
    size = (params.block_size, params.block_size)

    shapes = [background_plate(grid, params)]
    for (row, col), dark in np.ndenumerate(grid.matrix):
        if excluded[row, col]:
            continue
        shapes.append(
            ShapeDescriptor(
                kind=ShapeKind.SQUARE if corners[row, col] else ShapeKind.CIRCLE,
                color=ShapeColor.FOREGROUND if dark else ShapeColor.BACKGROUND,
                center=cell_center(row, col, grid, params),
                size=size,
            )
        )

    logger.debug(
        "Laid out %d shapes for a %dx%d grid (%d cells excluded)",
        len(shapes),
        grid.width,
        grid.height,
        center_zone.cell_count,
    )
    return shapes
