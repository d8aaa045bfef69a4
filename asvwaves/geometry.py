"""Vector, triangle and mesh geometry with ray and line intersection queries."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Sequence, Union

EPSILON = sys.float_info.epsilon


@dataclass(frozen=True)
class Vector3:
    """A point or vector in three dimensions."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3:
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def squared_length(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.squared_length())


@dataclass(frozen=True)
class Vector2:
    """A vector in two dimensions."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def squared_length(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.squared_length())


class Triangle(NamedTuple):
    """A triangle given by its three corner points."""

    p0: Vector3
    p1: Vector3
    p2: Vector3


@dataclass
class Mesh:
    """An indexed triangle surface mesh."""

    _points: list[Vector3] = field(default_factory=list)
    _faces: list[tuple[int, int, int]] = field(default_factory=list)

    @property
    def vertices(self) -> range:
        return range(len(self._points))

    @property
    def faces(self) -> range:
        return range(len(self._faces))

    def add_vertex(self, point: Vector3) -> int:
        """Add a vertex and return its index."""
        self._points.append(point)
        return len(self._points) - 1

    def add_face(self, v0: int, v1: int, v2: int) -> int:
        """Add a triangular face over three existing vertices and return its index."""
        count = len(self._points)
        for v in (v0, v1, v2):
            if not 0 <= v < count:
                raise IndexError(f"vertex index {v} out of range for {count} vertices")
        self._faces.append((v0, v1, v2))
        return len(self._faces) - 1

    def point(self, vertex: int) -> Vector3:
        return self._points[vertex]

    def set_point(self, vertex: int, point: Vector3) -> None:
        self._points[vertex] = point

    def face_vertices(self, face: int) -> tuple[int, int, int]:
        return self._faces[face]

    def copy(self) -> Mesh:
        return Mesh(list(self._points), list(self._faces))


def triangle_area(p0: Vector3, p1: Vector3, p2: Vector3) -> float:
    return 0.5 * math.sqrt((p1 - p0).cross(p2 - p0).squared_length())


def triangle_centroid(p0: Vector3, p1: Vector3, p2: Vector3) -> Vector3:
    return Vector3(
        (p0.x + p1.x + p2.x) / 3.0,
        (p0.y + p1.y + p2.y) / 3.0,
        (p0.z + p1.z + p2.z) / 3.0,
    )


def midpoint(p0: Vector3, p1: Vector3) -> Vector3:
    return Vector3((p0.x + p1.x) / 2.0, (p0.y + p1.y) / 2.0, (p0.z + p1.z) / 2.0)


def normalize(v: Union[Vector2, Vector3]) -> Union[Vector2, Vector3]:
    """Return ``v`` scaled to unit length; a zero vector is returned unchanged."""
    squared = v.squared_length()
    if squared == 0.0:
        return v
    return v / math.sqrt(squared)


def normal(p0: Vector3, p1: Vector3, p2: Vector3) -> Vector3:
    """Unit normal of the triangle, or the zero vector for a degenerate one."""
    return normalize((p1 - p0).cross(p2 - p0))


def make_triangle(mesh: Mesh, face: int) -> Triangle:
    v0, v1, v2 = mesh.face_vertices(face)
    return Triangle(mesh.point(v0), mesh.point(v1), mesh.point(v2))


def face_normal(mesh: Mesh, face: int) -> Vector3:
    return normal(*make_triangle(mesh, face))


def horizontal_intercept(high: Vector3, mid: Vector3, low: Vector3) -> Vector3:
    """Point on the segment low-high at the height of ``mid``.

    When low and high share a height, ``low``'s horizontal position is used.
    """
    t = 0.0
    div = high.z - low.z
    if abs(div) > EPSILON:
        t = (mid.z - low.z) / div
    return Vector3(
        low.x + t * (high.x - low.x),
        low.y + t * (high.y - low.y),
        mid.z,
    )


def _line_parameter(
    origin: Vector3, ray: Vector3, p0: Vector3, p1: Vector3, p2: Vector3
) -> float | None:
    """Parameter along the line where it crosses the triangle, or None."""
    e1 = p1 - p0
    e2 = p2 - p0
    h = ray.cross(e2)
    a = e1.dot(h)
    if -EPSILON < a < EPSILON:
        return None
    f = 1.0 / a
    s = origin - p0
    u = f * s.dot(h)
    if u < 0.0 or u > 1.0:
        return None
    q = s.cross(e1)
    v = f * ray.dot(q)
    if v < 0.0 or u + v > 1.0:
        return None
    return f * e2.dot(q)


def ray_intersects_triangle(
    origin: Vector3, direction: Vector3, p0: Vector3, p1: Vector3, p2: Vector3
) -> Vector3 | None:
    """Intersection of the ray from ``origin`` with the triangle, or None."""
    t = _line_parameter(origin, direction, p0, p1, p2)
    if t is None or t <= EPSILON:
        return None
    return origin + direction * t


def line_intersects_triangle(
    origin: Vector3, direction: Vector3, p0: Vector3, p1: Vector3, p2: Vector3
) -> Vector3 | None:
    """Intersection of the infinite line through ``origin`` with the triangle, or None."""
    t = _line_parameter(origin, direction, p0, p1, p2)
    if t is None:
        return None
    return origin + direction * t


@dataclass
class _Node:
    lower: tuple[float, float, float]
    upper: tuple[float, float, float]
    triangles: list[Triangle] = field(default_factory=list)
    left: _Node | None = None
    right: _Node | None = None


def _bounds(triangles: Sequence[Triangle]) -> tuple[tuple[float, ...], tuple[float, ...]]:
    coords = [tuple(p) for tri in triangles for p in tri]
    lower = tuple(min(c[i] for c in coords) for i in range(3))
    upper = tuple(max(c[i] for c in coords) for i in range(3))
    return lower, upper


_LEAF_SIZE = 4


def _build(triangles: list[Triangle]) -> _Node:
    lower, upper = _bounds(triangles)
    node = _Node(lower, upper)  # type: ignore[arg-type]
    if len(triangles) <= _LEAF_SIZE:
        node.triangles = triangles
        return node
    axis = max(range(3), key=lambda i: upper[i] - lower[i])
    ordered = sorted(triangles, key=lambda tri: sum(tuple(p)[axis] for p in tri))
    half = len(ordered) // 2
    node.left = _build(ordered[:half])
    node.right = _build(ordered[half:])
    return node


def _ray_hits_box(
    origin: Vector3, direction: Vector3, lower: Sequence[float], upper: Sequence[float], t_max: float
) -> bool:
    t_near, t_far = 0.0, t_max
    for o, d, lo, hi in zip(origin, direction, lower, upper):
        if d == 0.0:
            if o < lo or o > hi:
                return False
            continue
        t0, t1 = (lo - o) / d, (hi - o) / d
        if t0 > t1:
            t0, t1 = t1, t0
        t_near = max(t_near, t0)
        t_far = min(t_far, t1)
        if t_near > t_far:
            return False
    return True


class AABBTree:
    """Bounding volume hierarchy over the faces of a mesh for ray queries."""

    def __init__(self, mesh: Mesh) -> None:
        triangles = [make_triangle(mesh, face) for face in mesh.faces]
        self._root = _build(triangles) if triangles else None

    def first_intersection(self, origin: Vector3, direction: Vector3) -> Vector3 | None:
        """Nearest point where the ray from ``origin`` meets the mesh, or None."""
        if self._root is None:
            return None
        best_t = math.inf
        stack = [self._root]
        while stack:
            node = stack.pop()
            if not _ray_hits_box(origin, direction, node.lower, node.upper, best_t):
                continue
            for tri in node.triangles:
                t = _line_parameter(origin, direction, *tri)
                if t is not None and 0.0 <= t < best_t:
                    best_t = t
            stack.extend(child for child in (node.left, node.right) if child is not None)
        if math.isinf(best_t):
            return None
        return origin + direction * best_t


def make_aabb_tree(mesh: Mesh) -> AABBTree:
    return AABBTree(mesh)


def search_mesh(
    target: Union[Mesh, AABBTree], origin: Vector3, direction: Vector3
) -> Vector3 | None:
    """Intersect the line through ``origin`` with a mesh, searching forwards then backwards."""
    tree = target if isinstance(target, AABBTree) else AABBTree(target)
    point = tree.first_intersection(origin, direction)
    if point is None:
        point = tree.first_intersection(origin, -direction)
    return point


def mesh_from_arrays(vertices: Sequence[float], indices: Sequence[int]) -> Mesh:
    """Build a mesh from flat coordinate (x, y, z, ...) and face index arrays."""
    if len(vertices) % 3:
        raise ValueError("vertex array length must be a multiple of 3")
    if len(indices) % 3:
        raise ValueError("index array length must be a multiple of 3")
    mesh = Mesh()
    coords = iter(vertices)
    for x, y, z in zip(coords, coords, coords):
        mesh.add_vertex(Vector3(float(x), float(y), float(z)))
    idx = iter(indices)
    for i0, i1, i2 in zip(idx, idx, idx):
        mesh.add_face(int(i0), int(i1), int(i2))
    return mesh