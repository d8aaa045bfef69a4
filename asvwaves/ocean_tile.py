"""A square ocean tile: a regular vertex grid displaced by a periodic wave simulation."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Protocol, Sequence

from asvwaves.geometry import Vector2, Vector3
from asvwaves.tangent_space import compute_tbn, compute_vertex_normals

Face = tuple[int, int, int]


@dataclass
class WaveFields:
    """Sampled wave quantities on an ``N x N`` grid, row by row (x varies fastest)."""

    heights: list[float]
    dhdx: list[float]
    dhdy: list[float]
    displacements_x: list[float]
    displacements_y: list[float]
    dxdx: list[float]
    dydy: list[float]
    dxdy: list[float]

    @classmethod
    def zeros(cls, count: int) -> WaveFields:
        """Fields of ``count`` samples, all zero."""
        return cls(*([0.0] * count for _ in fields(cls)))

    def validate(self, count: int) -> None:
        """Raise ValueError unless every field holds exactly ``count`` samples."""
        for f in fields(self):
            values = getattr(self, f.name)
            if len(values) != count:
                raise ValueError(
                    f"wave field {f.name!r} has {len(values)} samples, expected {count}"
                )


class WaveSimulation(Protocol):
    """A periodic wave simulation sampled on an ``N x N`` grid."""

    def set_time(self, time: float) -> None:
        """Set the simulation time in seconds."""

    def set_wind_velocity(self, ux: float, uy: float) -> None:
        """Set the wind velocity driving the waves."""

    def compute_heights(self) -> Sequence[float]:
        """Return the surface heights, ``N * N`` samples."""

    def compute_displacements(self) -> tuple[Sequence[float], Sequence[float]]:
        """Return the horizontal displacements ``(dx, dy)``, ``N * N`` samples each."""

    def compute_displacements_and_derivatives(self) -> WaveFields:
        """Return heights, displacements and their spatial derivatives."""


class OceanTile:
    """A square tile of ``(N + 1) x (N + 1)`` vertices driven by a wave simulation.

    The simulation supplies ``N x N`` samples; the extra row and column of the
    tile (the skirt) repeat the first row and column, as the waves are periodic.
    Texture coordinates put ``(u, v) = (0, 0)`` at the top left.
    """

    def __init__(
        self,
        resolution: int,
        tile_size: float,
        wave_simulation: WaveSimulation,
        has_visuals: bool = False,
    ) -> None:
        if resolution <= 0:
            raise ValueError("resolution must be positive")
        if tile_size <= 0.0:
            raise ValueError("tile size must be positive")
        self.resolution = int(resolution)
        self.tile_size = float(tile_size)
        self.has_visuals = bool(has_visuals)
        self.wave_simulation = wave_simulation

        n = self.resolution
        self.row_length = n + 1
        self.num_vertices = (n + 1) * (n + 1)
        self.num_faces = 2 * n * n
        self.spacing = self.tile_size / n

        self._fields = WaveFields.zeros(n * n)
        self._vertices0: list[Vector3] = []
        self.vertices: list[Vector3] = []
        self.tex_coords: list[Vector2] = []
        self.faces: list[Face] = []
        self.tangents: list[Vector3] = []
        self.bitangents: list[Vector3] = []
        self.normals: list[Vector3] = []

    @property
    def fields(self) -> WaveFields:
        """The wave samples from the most recent update."""
        return self._fields

    def create(self) -> None:
        """Build the flat tile: vertices, texture coordinates, faces and zeroed bases."""
        n = self.resolution
        length = self.tile_size
        spacing = self.spacing
        tex_step = length / n

        self._vertices0 = []
        self.tex_coords = []
        for iy in range(n + 1):
            py = iy * spacing - length / 2.0
            for ix in range(n + 1):
                px = ix * spacing - length / 2.0
                self._vertices0.append(Vector3(px, py, 0.0))
                self.tex_coords.append(Vector2(ix * tex_step, 1.0 - iy * tex_step))
        self.vertices = list(self._vertices0)

        self.faces = []
        for iy in range(n):
            for ix in range(n):
                idx0 = iy * (n + 1) + ix
                idx1 = iy * (n + 1) + ix + 1
                idx2 = (iy + 1) * (n + 1) + ix + 1
                idx3 = (iy + 1) * (n + 1) + ix
                self.faces.append((idx0, idx1, idx2))
                self.faces.append((idx0, idx2, idx3))

        count = len(self.vertices)
        self.tangents = [Vector3()] * count
        self.bitangents = [Vector3()] * count
        self.normals = [Vector3()] * count

        if self.has_visuals:
            self.compute_tangent_space()

    def _require_created(self) -> None:
        if not self._vertices0:
            raise RuntimeError("the tile has not been created; call create() first")

    def compute_normals(self) -> None:
        """Set vertex normals from the normals of the adjacent faces."""
        self._require_created()
        self.normals = compute_vertex_normals(self.vertices, self.faces)

    def compute_tangent_space(self) -> None:
        """Set the tangent, bitangent and normal of every vertex from the geometry."""
        self._require_created()
        self.tangents, self.bitangents, self.normals = compute_tbn(
            self.vertices, self.tex_coords, self.faces
        )

    def set_wind_velocity(self, ux: float, uy: float) -> None:
        self.wave_simulation.set_wind_velocity(ux, uy)

    def update(self, time: float) -> None:
        """Advance the tile to ``time``, recomputing the tangent space if visual."""
        self.update_vertices(time)
        if self.has_visuals:
            self.compute_tangent_space()

    def _update_vertex(self, idx0: int, idx1: int) -> None:
        f = self._fields
        v0 = self._vertices0[idx0]
        self.vertices[idx0] = Vector3(
            v0.x + f.displacements_x[idx1],
            v0.y + f.displacements_y[idx1],
            v0.z + f.heights[idx1],
        )
        dsxdy = f.dxdy[idx1]
        self.tangents[idx0] = Vector3(f.dxdx[idx1] + 1.0, dsxdy, f.dhdx[idx1])
        self.bitangents[idx0] = Vector3(dsxdy, f.dydy[idx1] + 1.0, f.dhdy[idx1])

    def update_vertices(self, time: float) -> None:
        """Sample the simulation at ``time`` and displace every vertex."""
        self._require_created()
        n = self.resolution
        count = n * n
        sim = self.wave_simulation
        sim.set_time(time)

        if self.has_visuals:
            fields_ = sim.compute_displacements_and_derivatives()
            fields_.validate(count)
            self._fields = WaveFields(
                *(list(getattr(fields_, f.name)) for f in fields(WaveFields))
            )
        else:
            heights = list(sim.compute_heights())
            dx, dy = sim.compute_displacements()
            updated = WaveFields(
                heights=heights,
                dhdx=self._fields.dhdx,
                dhdy=self._fields.dhdy,
                displacements_x=list(dx),
                displacements_y=list(dy),
                dxdx=self._fields.dxdx,
                dydy=self._fields.dydy,
                dxdy=self._fields.dxdy,
            )
            updated.validate(count)
            self._fields = updated

        row = n + 1
        for iy in range(n):
            for ix in range(n):
                self._update_vertex(iy * row + ix, iy * n + ix)

        for i in range(n):
            # Top row repeats the bottom row; right column repeats the left column.
            self._update_vertex(n * row + i, i)
            self._update_vertex(i * row + n, i * n)
        self._update_vertex(row * row - 1, 0)