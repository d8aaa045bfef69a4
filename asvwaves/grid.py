"""Regular triangulated grids in the xy-plane and line searches over them."""

from __future__ import annotations

import math
from typing import Sequence

from asvwaves.geometry import (
    Mesh,
    Triangle,
    Vector3,
    face_normal,
    line_intersects_triangle,
    make_triangle,
    normal,
)

GridIndex = tuple[int, int, int]


class Grid:
    """A rectangular grid of ``nx * ny`` cells, each split into two triangles.

    The grid is centred on the origin of its own mesh. Vertices are numbered
    row by row (x varies fastest) and the faces of cell ``(ix, iy)`` are
    ``2 * (nx * iy + ix) + k`` for ``k`` in ``(0, 1)``.
    """

    def __init__(self, size: Sequence[float], cell_count: Sequence[int]) -> None:
        lx_total, ly_total = (float(s) for s in size)
        nx, ny = (int(n) for n in cell_count)
        if nx <= 0 or ny <= 0:
            raise ValueError("cell counts must be positive")
        self.size: tuple[float, float] = (lx_total, ly_total)
        self.cell_count: tuple[int, int] = (nx, ny)
        self.center = Vector3()
        self.mesh = Mesh()
        self._normals: list[Vector3] = []

        lx = lx_total / nx
        ly = ly_total / ny
        for iy in range(ny + 1):
            py = iy * ly - ly_total / 2.0
            for ix in range(nx + 1):
                px = ix * lx - lx_total / 2.0
                self.mesh.add_vertex(Vector3(px, py, 0.0))

        for iy in range(ny):
            for ix in range(nx):
                idx0 = iy * (nx + 1) + ix
                idx1 = iy * (nx + 1) + ix + 1
                idx2 = (iy + 1) * (nx + 1) + ix + 1
                idx3 = (iy + 1) * (nx + 1) + ix
                self.mesh.add_face(idx0, idx1, idx2)
                self.mesh.add_face(idx0, idx2, idx3)
                p0, p1, p2, p3 = (self.mesh.point(i) for i in (idx0, idx1, idx2, idx3))
                self._normals.append(normal(p0, p1, p2))
                self._normals.append(normal(p0, p2, p3))

    def _face_index(self, ix: int, iy: int, k: int) -> int:
        return 2 * (self.cell_count[0] * iy + ix) + k

    def vertex_count(self) -> int:
        return len(self.mesh.vertices)

    def face_count(self) -> int:
        return len(self.mesh.faces)

    def point(self, index: int) -> Vector3:
        return self.mesh.point(index)

    def set_point(self, index: int, point: Vector3) -> None:
        self.mesh.set_point(index, point)

    def triangle(self, ix: int, iy: int, k: int) -> Triangle:
        return make_triangle(self.mesh, self._face_index(ix, iy, k))

    def face(self, ix: int, iy: int, k: int) -> int:
        return self._face_index(ix, iy, k)

    def normal(self, ix: int, iy: int, k: int) -> Vector3:
        return self._normals[self._face_index(ix, iy, k)]

    def normal_at(self, index: int) -> Vector3:
        return self._normals[index]

    def recalculate_normals(self) -> None:
        """Recompute every face normal from the current vertex positions."""
        self._normals = [face_normal(self.mesh, face) for face in self.mesh.faces]

    def copy(self) -> Grid:
        """Return an independent copy of the grid."""
        other = Grid.__new__(Grid)
        other.size = self.size
        other.cell_count = self.cell_count
        other.center = self.center
        other.mesh = self.mesh.copy()
        other._normals = list(self._normals)
        return other


def find_intersection_index(grid: Grid, x: float, y: float) -> GridIndex | None:
    """Cell and triangle ``(ix, iy, k)`` under the horizontal point, or None if outside."""
    nx, ny = grid.cell_count
    lx_total, ly_total = grid.size
    lx = lx_total / nx
    ly = ly_total / ny
    lower_x = -lx_total / 2.0 + grid.center.x
    upper_x = lx_total / 2.0 + grid.center.x
    lower_y = -ly_total / 2.0 + grid.center.y
    upper_y = ly_total / 2.0 + grid.center.y

    if x < lower_x or x > upper_x:
        return None
    if y < lower_y or y > upper_y:
        return None

    ix = math.floor((x - lower_x) / lx)
    iy = math.floor((y - lower_y) / ly)

    x0 = ix * lx + lower_x
    y0 = iy * ly + lower_y
    m = ly / lx
    c = y0 - m * x0
    k = 1 if y > m * x + c else 0
    return ix, iy, k


def find_intersection_triangle(
    grid: Grid, origin: Vector3, direction: Vector3, index: Sequence[int]
) -> Vector3 | None:
    """Intersection of the line with the single triangle ``index``, or None."""
    ix, iy, k = index
    p0, p1, p2 = grid.triangle(ix, iy, k)
    return line_intersects_triangle(origin, direction, p0, p1, p2)


def _search_cell(
    grid: Grid, origin: Vector3, direction: Vector3, ix: int, iy: int, k: int
) -> tuple[Vector3 | None, int]:
    point = find_intersection_triangle(grid, origin, direction, (ix, iy, k))
    if point is not None:
        return point, k
    k = 1 - k
    return find_intersection_triangle(grid, origin, direction, (ix, iy, k)), k


def find_intersection_cell(
    grid: Grid, origin: Vector3, direction: Vector3, index: Sequence[int]
) -> tuple[GridIndex, Vector3] | None:
    """Search both triangles of a cell, the one given by ``index`` first.

    Returns the triangle index that was hit and the intersection point, or None.
    """
    ix, iy, k = index
    point, k = _search_cell(grid, origin, direction, ix, iy, k)
    if point is None:
        return None
    return (ix, iy, k), point


def find_intersection_grid(
    grid: Grid, origin: Vector3, direction: Vector3, index: Sequence[int]
) -> tuple[GridIndex, Vector3] | None:
    """Search the grid in expanding shells of cells around ``index``.

    Returns the triangle index that was hit and the intersection point, or None
    when no cell of the grid is crossed by the line.
    """
    kx, ky, k = (int(i) for i in index)
    point, k = _search_cell(grid, origin, direction, kx, ky, k)
    if point is not None:
        return (kx, ky, k), point

    nx, ny = grid.cell_count
    kxmin, kxmax = 0, nx - 1
    kymin, kymax = 0, ny - 1
    kxm0 = kxp0 = kx
    kym0 = kyp0 = ky

    while True:
        expanded = False
        kxm = max(kxm0 - 1, kxmin)
        kxp = min(kxp0 + 1, kxmax)
        kym = max(kym0 - 1, kymin)
        kyp = min(kyp0 + 1, kymax)

        cells: list[tuple[int, int]] = []
        row0 = row1 = 0
        if kxm != kxm0:
            expanded = True
            row0 = 1
            cells.extend((kxm, j) for j in range(kym, kyp + 1))
        if kxp != kxp0:
            expanded = True
            row1 = 1
            cells.extend((kxp, j) for j in range(kym, kyp + 1))
        if kym != kym0:
            expanded = True
            cells.extend((i, kym) for i in range(kxm + row0, kxp - row1 + 1))
        if kyp != kyp0:
            expanded = True
            cells.extend((i, kyp) for i in range(kxm + row0, kxp - row1 + 1))

        for cx, cy in cells:
            point, k = _search_cell(grid, origin, direction, cx, cy, k)
            if point is not None:
                return (cx, cy, k), point

        if not expanded:
            return None
        kxm0, kxp0, kym0, kyp0 = kxm, kxp, kym, kyp