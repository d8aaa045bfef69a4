import pytest

from asvwaves.geometry import Vector3, make_aabb_tree, search_mesh
from asvwaves.grid import (
    Grid,
    find_intersection_cell,
    find_intersection_grid,
    find_intersection_index,
    find_intersection_triangle,
)

UP = Vector3(0, 0, 1)


def assert_point(actual, expected):
    assert actual is not None
    assert actual.x == pytest.approx(expected.x, abs=1e-12)
    assert actual.y == pytest.approx(expected.y, abs=1e-12)
    assert actual.z == pytest.approx(expected.z, abs=1e-12)


@pytest.fixture
def grid_4x2():
    return Grid((4, 2), (4, 2))


def test_constructor():
    grid = Grid((2, 2), (2, 2))
    assert grid.size == (2.0, 2.0)
    assert grid.cell_count == (2, 2)
    assert grid.vertex_count() == 9
    assert grid.face_count() == 8


def test_vertex_positions():
    grid = Grid((2, 2), (2, 2))
    assert grid.point(0) == Vector3(-1, -1, 0)
    assert grid.point(4) == Vector3(0, 0, 0)
    assert grid.point(8) == Vector3(1, 1, 0)


def test_triangles_and_faces():
    grid = Grid((2, 2), (2, 2))
    tri = grid.triangle(0, 0, 0)
    assert tuple(tri) == (Vector3(-1, -1, 0), Vector3(0, -1, 0), Vector3(0, 0, 0))
    tri = grid.triangle(0, 0, 1)
    assert tuple(tri) == (Vector3(-1, -1, 0), Vector3(0, 0, 0), Vector3(-1, 0, 0))
    assert grid.face(1, 1, 1) == 7
    assert grid.face(1, 0, 0) == 2


def test_normals_point_up():
    grid = Grid((2, 2), (2, 2))
    assert all(grid.normal_at(i) == Vector3(0, 0, 1) for i in range(grid.face_count()))
    assert grid.normal(1, 1, 0) == Vector3(0, 0, 1)


def test_set_point_and_recalculate_normals():
    grid = Grid((2, 2), (2, 2))
    for i in range(grid.vertex_count()):
        p = grid.point(i)
        grid.set_point(i, Vector3(p.x, p.y, p.z + 10))
    assert grid.point(4) == Vector3(0, 0, 10)
    grid.set_point(0, Vector3(-1, -1, 11))
    grid.recalculate_normals()
    tilted = grid.normal(0, 0, 0)
    assert tilted.z < 1.0
    assert tilted.length() == pytest.approx(1.0)
    assert grid.normal(1, 1, 0) == Vector3(0, 0, 1)


def test_copy_is_independent():
    grid = Grid((2, 2), (2, 2))
    other = grid.copy()
    other.set_point(0, Vector3(5, 5, 5))
    assert grid.point(0) == Vector3(-1, -1, 0)
    assert other.point(0) == Vector3(5, 5, 5)
    assert other.size == grid.size
    assert other.cell_count == grid.cell_count


def test_invalid_cell_count():
    with pytest.raises(ValueError):
        Grid((2, 2), (0, 2))


@pytest.mark.parametrize(
    "x, y, expected",
    [
        (-1.25, -0.50, (0, 0, 0)),
        (-1.75, -0.50, (0, 0, 1)),
        (-0.25, -0.50, (1, 0, 0)),
        (-0.75, -0.50, (1, 0, 1)),
        (0.75, -0.50, (2, 0, 0)),
        (0.25, -0.50, (2, 0, 1)),
        (1.75, -0.50, (3, 0, 0)),
        (1.25, -0.50, (3, 0, 1)),
        (-1.25, 0.50, (0, 1, 0)),
        (-1.75, 0.50, (0, 1, 1)),
        (-0.25, 0.50, (1, 1, 0)),
        (-0.75, 0.50, (1, 1, 1)),
        (0.75, 0.50, (2, 1, 0)),
        (0.25, 0.50, (2, 1, 1)),
        (1.75, 0.50, (3, 1, 0)),
        (1.25, 0.50, (3, 1, 1)),
    ],
)
def test_find_intersection_index(grid_4x2, x, y, expected):
    assert find_intersection_index(grid_4x2, x, y) == expected


def test_find_intersection_index_outside(grid_4x2):
    assert find_intersection_index(grid_4x2, 2.5, 0.0) is None
    assert find_intersection_index(grid_4x2, 0.0, -1.5) is None


def test_find_intersection_index_with_center(grid_4x2):
    grid_4x2.center = Vector3(10, 0, 0)
    assert find_intersection_index(grid_4x2, 11.75, 0.5) == (3, 1, 0)
    assert find_intersection_index(grid_4x2, 1.75, 0.5) is None


@pytest.mark.parametrize(
    "x, y, expected",
    [(-1.25, -0.50, (0, 0, 0)), (-1.75, -0.50, (0, 0, 1)), (0.75, 0.50, (2, 1, 0))],
)
def test_find_intersection_triangle(grid_4x2, x, y, expected):
    index = find_intersection_index(grid_4x2, x, y)
    assert index == expected
    point = find_intersection_triangle(grid_4x2, Vector3(x, y, 10), UP, index)
    assert_point(point, Vector3(x, y, 0))


def test_find_intersection_triangle_wrong_triangle(grid_4x2):
    point = find_intersection_triangle(grid_4x2, Vector3(-1.25, -0.5, 10), UP, (0, 0, 1))
    assert point is None


def test_find_intersection_cell(grid_4x2):
    x, y = -1.25, -0.50
    index = find_intersection_index(grid_4x2, x, y)
    assert index == (0, 0, 0)
    swapped = (index[0], index[1], 1 - index[2])
    assert swapped == (0, 0, 1)
    result = find_intersection_cell(grid_4x2, Vector3(x, y, 10), UP, swapped)
    assert result is not None
    found, point = result
    assert found == (0, 0, 0)
    assert_point(point, Vector3(x, y, 0))


def test_find_intersection_cell_misses(grid_4x2):
    assert find_intersection_cell(grid_4x2, Vector3(1.75, 0.5, 10), UP, (0, 0, 0)) is None


def test_find_intersection_grid(grid_4x2):
    x, y = 1.75, 0.50
    assert find_intersection_index(grid_4x2, x, y) == (3, 1, 0)
    result = find_intersection_grid(grid_4x2, Vector3(x, y, 10), UP, (0, 0, 0))
    assert result is not None
    found, point = result
    assert_point(point, Vector3(x, y, 0))
    assert found == (3, 1, 0)


def test_find_intersection_grid_outside(grid_4x2):
    assert find_intersection_grid(grid_4x2, Vector3(5, 5, 10), UP, (0, 0, 0)) is None


def test_search_cell_with_tree():
    grid = Grid((2, 2), (2, 2))
    tree = make_aabb_tree(grid.mesh)
    point = search_mesh(tree, Vector3(0.5, 0.5, 1), UP)
    assert_point(point, Vector3(0.5, 0.5, 0))


@pytest.mark.parametrize(
    "x, y", [(-0.5, -0.5), (0.5, -0.5), (-0.5, 0.5), (0.5, 0.5)]
)
def test_search_grid_with_tree(x, y):
    grid = Grid((2, 2), (2, 2))
    tree = make_aabb_tree(grid.mesh)
    point = search_mesh(tree, Vector3(x, y, 1), UP)
    assert_point(point, Vector3(x, y, 0))