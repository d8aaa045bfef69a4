"""Tangent space (tangent, bitangent, normal) and vertex normals for triangle meshes.

Texture coordinates follow the convention where ``(u, v) = (0, 0)`` is the top
left of a texture and ``(1, 1)`` the bottom right. The per-face calculation
flips the sign of the ``v`` terms to match.
"""

from __future__ import annotations

from typing import Sequence

from asvwaves.geometry import Vector2, Vector3, normalize

Face = Sequence[int]

_V_SIGN = -1.0


def compute_face_tbn(
    p0: Vector3,
    p1: Vector3,
    p2: Vector3,
    uv0: Vector2,
    uv1: Vector2,
    uv2: Vector2,
) -> tuple[Vector3, Vector3, Vector3]:
    """Unit tangent, bitangent and normal of one textured triangle.

    Raises ValueError when the texture coordinates of the triangle are
    degenerate (they span no area), since no tangent space is defined then.
    """
    edge1 = p1 - p0
    edge2 = p2 - p0
    duv1 = uv1 - uv0
    duv2 = uv2 - uv0

    det = duv1.x * duv2.y - duv2.x * duv1.y
    if det == 0.0:
        raise ValueError("texture coordinates of the triangle are degenerate")
    f = 1.0 / det * _V_SIGN

    tangent = normalize((edge1 * duv2.y - edge2 * duv1.y) * (f * _V_SIGN))
    bitangent = normalize((edge1 * -duv2.x + edge2 * duv1.x) * f)
    normal = normalize(tangent.cross(bitangent))
    return tangent, bitangent, normal


def _check_face(face: Face, count: int) -> tuple[int, int, int]:
    if len(face) != 3:
        raise ValueError(f"a face must have 3 vertex indices, got {len(face)}")
    i0, i1, i2 = (int(i) for i in face)
    for i in (i0, i1, i2):
        if not 0 <= i < count:
            raise IndexError(f"vertex index {i} out of range for {count} vertices")
    return i0, i1, i2


def compute_tbn(
    vertices: Sequence[Vector3],
    tex_coords: Sequence[Vector2],
    faces: Sequence[Face],
) -> tuple[list[Vector3], list[Vector3], list[Vector3]]:
    """Per-vertex tangent space for a whole mesh.

    The tangent space of every face is added to each of its vertices and the
    sums are normalised. Vertices used by no face get zero vectors. Returns the
    lists ``(tangents, bitangents, normals)``, one entry per vertex.
    """
    if len(tex_coords) != len(vertices):
        raise ValueError("there must be one texture coordinate per vertex")

    count = len(vertices)
    tangents = [Vector3()] * count
    bitangents = [Vector3()] * count
    normals = [Vector3()] * count

    for face in faces:
        idx = _check_face(face, count)
        t, b, n = compute_face_tbn(
            *(vertices[i] for i in idx), *(tex_coords[i] for i in idx)
        )
        for i in idx:
            tangents[i] = tangents[i] + t
            bitangents[i] = bitangents[i] + b
            normals[i] = normals[i] + n

    return (
        [normalize(t) for t in tangents],
        [normalize(b) for b in bitangents],
        [normalize(n) for n in normals],
    )


def compute_vertex_normals(
    vertices: Sequence[Vector3], faces: Sequence[Face]
) -> list[Vector3]:
    """Per-vertex normals: the normalised sum of the unit normals of adjacent faces."""
    count = len(vertices)
    normals = [Vector3()] * count
    for face in faces:
        i0, i1, i2 = _check_face(face, count)
        v0, v1, v2 = vertices[i0], vertices[i1], vertices[i2]
        face_normal = normalize((v1 - v0).cross(v2 - v0))
        for i in (i0, i1, i2):
            normals[i] = normals[i] + face_normal
    return [normalize(n) for n in normals]