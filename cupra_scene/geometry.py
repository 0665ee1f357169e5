"""Matrix helpers, built-in meshes and smooth vertex normals.

Matrices are 4x4 numpy arrays that act on column vectors (``M @ p``). Each
transform helper multiplies the given matrix on the right, so that
``translate(rotate(identity(), a, axis), t)`` first translates and then
rotates a point.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

TERRAIN_SIZE = 10.0
TERRAIN_LIGHT_COLOR = (1.0, 1.0, 1.0)
TERRAIN_DARK_COLOR = (1.0, 1.0, 1.0)


def _flat_triples(values: Sequence[float] | np.ndarray, what: str) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64).reshape(-1)
    if array.size % 3:
        raise ValueError(f"{what} must hold a multiple of three values, got {array.size}")
    return array.reshape(-1, 3)


def compute_vertex_normals(
    vertices: Sequence[float] | np.ndarray, normals: Sequence[float] | np.ndarray
) -> np.ndarray:
    """Smooth per-vertex normals for flat position and normal buffers.

    Every corner that shares the same position receives the normalised mean
    of the normals of all corners at that position. The result is a flat
    float32 array as long as the input.
    """
    positions = _flat_triples(vertices, "vertices")
    corner_normals = _flat_triples(normals, "normals")
    if positions.shape != corner_normals.shape:
        raise ValueError(
            f"vertices and normals differ in length: {positions.size} and {corner_normals.size}"
        )
    if not len(positions):
        return np.zeros(0, dtype=np.float32)
    _, groups = np.unique(positions, axis=0, return_inverse=True)
    groups = np.asarray(groups).reshape(-1)
    sums = np.zeros((groups.max() + 1, 3))
    np.add.at(sums, groups, corner_normals)
    counts = np.bincount(groups).reshape(-1, 1)
    means = sums / counts
    with np.errstate(divide="ignore", invalid="ignore"):
        units = means / np.linalg.norm(means, axis=1, keepdims=True)
    return units[groups].astype(np.float32).reshape(-1)


def identity() -> np.ndarray:
    """The 4x4 identity matrix."""
    return np.eye(4)


def _vec3(values: Sequence[float] | np.ndarray | float, what: str) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64).reshape(-1)
    if array.size == 1:
        return np.repeat(array, 3)
    if array.size != 3:
        raise ValueError(f"{what} must have three components, got {array.size}")
    return array


def translate(matrix: np.ndarray, offset: Sequence[float] | np.ndarray) -> np.ndarray:
    """``matrix`` followed on the right by a translation by ``offset``."""
    step = np.eye(4)
    step[:3, 3] = _vec3(offset, "offset")
    return np.asarray(matrix, dtype=np.float64) @ step


def rotate(
    matrix: np.ndarray, angle: float, axis: Sequence[float] | np.ndarray
) -> np.ndarray:
    """``matrix`` followed on the right by a rotation of ``angle`` radians about ``axis``."""
    direction = _vec3(axis, "axis")
    length = np.linalg.norm(direction)
    if length == 0:
        raise ValueError("rotation axis must not be the zero vector")
    x, y, z = direction / length
    c, s = math.cos(angle), math.sin(angle)
    t = 1.0 - c
    step = np.eye(4)
    step[:3, :3] = [
        [t * x * x + c, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, t * y * y + c, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, t * z * z + c],
    ]
    return np.asarray(matrix, dtype=np.float64) @ step


def scale(matrix: np.ndarray, factors: Sequence[float] | np.ndarray | float) -> np.ndarray:
    """``matrix`` followed on the right by a scaling; a single number scales uniformly."""
    step = np.eye(4)
    step[:3, :3] = np.diag(_vec3(factors, "factors"))
    return np.asarray(matrix, dtype=np.float64) @ step


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection onto a depth range of -1 to 1."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    f = 1.0 / math.tan(fovy / 2.0)
    projection = np.zeros((4, 4))
    projection[0, 0] = f / aspect
    projection[1, 1] = f
    projection[2, 2] = -(far + near) / (far - near)
    projection[2, 3] = -2.0 * far * near / (far - near)
    projection[3, 2] = -1.0
    return projection


def terrain_mesh() -> tuple[np.ndarray, np.ndarray]:
    """Positions and colours of the ground: eight triangles covering a square at y = 0."""
    s = TERRAIN_SIZE
    positions = np.array(
        [
            (0, 0, 0), (0, 0, s), (-s, 0, s),
            (0, 0, 0), (-s, 0, 0), (-s, 0, s),
            (0, 0, 0), (0, 0, s), (s, 0, s),
            (0, 0, 0), (s, 0, 0), (s, 0, s),
            (0, 0, 0), (0, 0, -s), (s, 0, -s),
            (0, 0, 0), (s, 0, 0), (s, 0, -s),
            (0, 0, 0), (0, 0, -s), (-s, 0, -s),
            (0, 0, 0), (-s, 0, 0), (-s, 0, -s),
        ],
        dtype=np.float32,
    )
    colors = np.array(
        [TERRAIN_LIGHT_COLOR, TERRAIN_DARK_COLOR, TERRAIN_DARK_COLOR] * 8, dtype=np.float32
    )
    return positions, colors


def house_mesh() -> tuple[np.ndarray, np.ndarray]:
    """Positions and colours of the little house: a square wall and a roof triangle."""
    positions = np.array(
        [
            (-0.5, -1.0, -0.5), (0.5, -1.0, -0.5), (-0.5, 0.0, -0.5),
            (-0.5, 0.0, -0.5), (0.5, -1.0, -0.5), (0.5, 0.0, -0.5),
            (0.5, 0.0, -0.5), (0.0, 0.6, -0.5), (-0.5, 0.0, -0.5),
        ],
        dtype=np.float32,
    )
    colors = np.array(
        [
            (1, 0, 0), (0, 1, 0), (0, 0, 1),
            (0, 0, 1), (0, 1, 0), (1, 0, 0),
            (1, 0, 0), (0, 1, 0), (0, 0, 1),
        ],
        dtype=np.float32,
    )
    return positions, colors