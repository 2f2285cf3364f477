# geocoin/board.py
"""
Board
=====

Maps continuous latitude/longitude onto a regular lattice of square cells.

Every cell handed out by a Board is *canonical*: asking twice for the same
(i, j) returns the very same object, so callers can compare cells with
``is`` and use them as dict keys without worrying about duplicates.

The canonical table grows for the whole session and is never pruned. That is
fine for a play session; a long-running service should bound it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, NamedTuple, Set, Tuple

logger = logging.getLogger(__name__)


class LatLng(NamedTuple):
    lat: float
    lng: float


@dataclass(frozen=True)
class Cell:
    i: int
    j: int

    def __str__(self) -> str:
        return f"{self.i},{self.j}"


class Board:
    """Flyweight factory for cells of side ``tile_width`` degrees."""

    def __init__(self, tile_width: float) -> None:
        if tile_width <= 0:
            raise ValueError(f"tile_width must be positive, got {tile_width}")
        self.tile_width = float(tile_width)
        self._known_cells: Dict[Tuple[int, int], Cell] = {}

    # ----------------------------------------------------------------------
    # Canonical lookup
    # ----------------------------------------------------------------------
    def _canonical(self, i: int, j: int) -> Cell:
        key = (i, j)
        cell = self._known_cells.get(key)
        if cell is None:
            cell = Cell(i, j)
            self._known_cells[key] = cell
        return cell

    @property
    def known_cell_count(self) -> int:
        return len(self._known_cells)

    def cell_by_indices(self, i: int, j: int) -> Cell:
        return self._canonical(int(i), int(j))

    def cell_at(self, lat: float, lng: float) -> Cell:
        i = math.floor(lat / self.tile_width)
        j = math.floor(lng / self.tile_width)
        return self._canonical(i, j)

    def cell_for_point(self, point: LatLng) -> Cell:
        return self.cell_at(point.lat, point.lng)

    # ----------------------------------------------------------------------
    # Geometry
    # ----------------------------------------------------------------------
    def bounds_of(self, cell: Cell) -> Tuple[LatLng, LatLng]:
        """Return (south_west, north_east) corners of the cell."""
        w = self.tile_width
        south_west = LatLng(cell.i * w, cell.j * w)
        north_east = LatLng((cell.i + 1) * w, (cell.j + 1) * w)
        return south_west, north_east

    def cells_near(self, point: LatLng, radius: int) -> Set[Cell]:
        """
        All cells in the square neighbourhood of ``radius`` cells around the
        cell containing ``point``: (2 * radius + 1) ** 2 of them.
        """
        origin = self.cell_for_point(point)
        result: Set[Cell] = set()
        for di in range(-radius, radius + 1):
            for dj in range(-radius, radius + 1):
                result.add(self._canonical(origin.i + di, origin.j + dj))
        return result
