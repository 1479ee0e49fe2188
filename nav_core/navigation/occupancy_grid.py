"""
Occupancy Grid.

Dense walkability model: a rectangular integer array where 0 is open floor
and any non-zero value (normally 1) is a wall. Cells are addressed as
(row, col) tuples; no per-cell node objects are stored.
"""

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from nav_core.proto.geometry import Point2D


Cell = Tuple[int, int]

# 4-connected moves (no diagonals)
GRID_MOVES: Tuple[Cell, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


class OccupancyGrid:
    """
    Rectangular occupancy grid.

    Usage:
        grid = OccupancyGrid.from_rows([
            [0, 0, 0],
            [1, 1, 0],
            [0, 0, 0],
        ])
        grid.is_walkable((1, 2))  # True
    """

    OPEN = 0
    WALL = 1

    def __init__(self, cells: np.ndarray, cell_size_m: float = 1.0):
        """
        Initialize grid.

        Args:
            cells: 2D array, 0 = open, non-zero = wall
            cell_size_m: Side length of one cell (for cell <-> point conversion)
        """
        cells = np.asarray(cells)
        if cells.ndim != 2:
            raise ValueError(f"Occupancy grid must be 2D, got shape {cells.shape}")
        if cell_size_m <= 0:
            raise ValueError(f"Cell size must be positive: {cell_size_m}")

        self._cells = cells.astype(np.int8, copy=True)
        self._cells.setflags(write=False)
        self.cell_size_m = cell_size_m

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], cell_size_m: float = 1.0) -> "OccupancyGrid":
        """
        Build a grid from nested row lists.

        Raises:
            ValueError: If rows are empty or ragged
        """
        if len(rows) == 0:
            raise ValueError("Occupancy grid needs at least one row")

        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise ValueError(f"Occupancy grid rows must have equal length, got {sorted(widths)}")

        return cls(np.array(rows, dtype=np.int8), cell_size_m)

    @classmethod
    def open_grid(cls, rows: int, cols: int, cell_size_m: float = 1.0) -> "OccupancyGrid":
        """Grid with no walls."""
        return cls(np.zeros((rows, cols), dtype=np.int8), cell_size_m)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._cells.shape

    @property
    def rows(self) -> int:
        return self._cells.shape[0]

    @property
    def cols(self) -> int:
        return self._cells.shape[1]

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the cell array."""
        return self._cells

    def in_bounds(self, cell: Cell) -> bool:
        row, col = cell
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_wall(self, cell: Cell) -> bool:
        return bool(self._cells[cell[0], cell[1]] != self.OPEN)

    def is_walkable(self, cell: Cell) -> bool:
        """In bounds and not a wall."""
        return self.in_bounds(cell) and not self.is_wall(cell)

    def neighbors(self, cell: Cell) -> List[Cell]:
        """
        Walkable 4-connected neighbors.

        Out-of-bounds and wall cells are pruned.
        """
        row, col = cell
        candidates = ((row + dr, col + dc) for dr, dc in GRID_MOVES)
        return [c for c in candidates if self.is_walkable(c)]

    def with_walls(self, cells: Iterable[Cell]) -> "OccupancyGrid":
        """Copy of this grid with extra wall cells."""
        updated = self._cells.copy()
        for row, col in cells:
            updated[row, col] = self.WALL
        return OccupancyGrid(updated, self.cell_size_m)

    def cell_to_point(self, cell: Cell) -> Point2D:
        """Floor-plan point of a cell (x along columns, y along rows)."""
        row, col = cell
        return Point2D(col * self.cell_size_m, row * self.cell_size_m)

    def point_to_cell(self, point: Point2D) -> Cell:
        """Nearest cell to a floor-plan point (may be out of bounds)."""
        return (int(round(point.y / self.cell_size_m)), int(round(point.x / self.cell_size_m)))

    def to_rows(self) -> List[List[int]]:
        return self._cells.tolist()
