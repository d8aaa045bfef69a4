# asvwaves

Geometry and surface tools for simulating waves acting on surface vessels:
triangle meshes with ray and line queries, regular water-patch grids, and
square ocean tiles displaced by a wave simulation. Pure Python, no runtime
dependencies.

## Modules

### `asvwaves.geometry`

- `Vector3` and `Vector2`: immutable vectors with `+`, `-`, unary `-`,
  scalar `*` and `/`, iteration, `dot`, `squared_length` and `length`;
  `Vector3` also has `cross`. `Vector3` is used for points as well.
- `Triangle`: a named tuple of three `Vector3` corners `p0`, `p1`, `p2`.
- `Mesh`: an indexed triangle mesh. `add_vertex(point)` and
  `add_face(v0, v1, v2)` return the new index (`add_face` raises
  `IndexError` for an unknown vertex); `point`, `set_point`,
  `face_vertices`, `copy`, and the `vertices` and `faces` index ranges.
- `triangle_area`, `triangle_centroid`, `midpoint`.
- `normalize(v)`: unit vector, leaving a zero vector unchanged.
- `normal(p0, p1, p2)` and `face_normal(mesh, face)`: unit normal, or the zero
  vector for a degenerate triangle.
- `horizontal_intercept(high, mid, low)`: the point on segment low–high at the
  height of `mid`.
- `ray_intersects_triangle` and `line_intersects_triangle`: the intersection
  point, or `None`. The ray version only accepts hits in front of the origin.
- `make_triangle(mesh, face)`.
- `AABBTree` / `make_aabb_tree(mesh)`: a bounding volume hierarchy;
  `first_intersection(origin, direction)` returns the nearest hit along the
  ray or `None`.
- `search_mesh(target, origin, direction)`: takes a `Mesh` or an `AABBTree`
  and searches forwards, then backwards, along the line.
- `mesh_from_arrays(vertices, indices)`: builds a mesh from flat `x, y, z, ...`
  coordinates and face indices; raises `ValueError` if a length is not a
  multiple of 3.

### `asvwaves.grid`

- `Grid(size, cell_count)`: a rectangle of `nx * ny` cells centred on the
  origin, each cell split into two triangles, with per-face normals.
  Attributes `size`, `cell_count`, `center` and `mesh`; methods
  `vertex_count`, `face_count`, `point`, `set_point`, `triangle(ix, iy, k)`,
  `face(ix, iy, k)`, `normal(ix, iy, k)`, `normal_at(index)`,
  `recalculate_normals` and `copy`.
- `find_intersection_index(grid, x, y)`: the `(ix, iy, k)` cell and triangle
  under a horizontal position (taking `grid.center` into account), or `None`
  outside the grid.
- `find_intersection_triangle(grid, origin, direction, index)`: the
  intersection point with one triangle, or `None`.
- `find_intersection_cell` and `find_intersection_grid`: return
  `(index, point)` for the triangle that was hit, or `None`. The grid search
  starts at `index` and widens in shells of cells until the grid is
  exhausted.

### `asvwaves.tangent_space`

- `compute_face_tbn(p0, p1, p2, uv0, uv1, uv2)`: unit tangent, bitangent and
  normal of one textured triangle, with `(u, v) = (0, 0)` at the top left of
  the texture. Raises `ValueError` for degenerate texture coordinates.
- `compute_tbn(vertices, tex_coords, faces)`: per-vertex tangents,
  bitangents and normals, accumulated over faces and normalised.
- `compute_vertex_normals(vertices, faces)`: per-vertex normals from the
  adjacent face normals.

### `asvwaves.ocean_tile`

- `WaveSimulation`: the protocol a wave simulation must follow —
  `set_time`, `set_wind_velocity`, `compute_heights`,
  `compute_displacements` and `compute_displacements_and_derivatives`.
- `WaveFields`: heights, displacements and their derivatives on an
  `N x N` grid, with `zeros(count)` and `validate(count)`.
- `OceanTile(resolution, tile_size, wave_simulation, has_visuals=False)`:
  `create()` lays out `(N + 1) x (N + 1)` vertices, texture coordinates and
  faces; `update(time)` / `update_vertices(time)` displace the vertices from
  the simulation, with the last row and column repeating the first (periodic
  waves); with `has_visuals` the tangent space is recomputed on each update.
  Also `compute_normals`, `compute_tangent_space`, `set_wind_velocity`, and
  the `vertices`, `tex_coords`, `faces`, `tangents`, `bitangents`, `normals`
  and `fields` members. Calling an update before `create()` raises
  `RuntimeError`.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from asvwaves.geometry import Vector3
from asvwaves.grid import Grid, find_intersection_index, find_intersection_grid

grid = Grid((4.0, 2.0), (4, 2))

find_intersection_index(grid, 1.75, 0.5)
# (3, 1, 0)

find_intersection_grid(
    grid, Vector3(1.75, 0.5, 10.0), Vector3(0.0, 0.0, 1.0), (0, 0, 0)
)
# ((3, 1, 0), Vector3(x=1.75, y=0.5, z=0.0))
```

## What it does not do

- It contains no wave simulation of its own. `OceanTile` is driven by any
  object that follows the `WaveSimulation` protocol; you supply it.
- It does no rendering: the tile's vertices, texture coordinates and tangent
  space are plain Python lists for you to hand to whatever draws them.
- It computes no hydrodynamic forces and has no command-line programs or
  messaging.