"""Matrix and quaternion helpers for 4x4 column-vector transforms.

Matrices are numpy arrays indexed ``[row, column]`` and applied as
``matrix @ vector``. Quaternions are arrays ordered ``(w, x, y, z)``.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Sequence

import numpy as np

_EPSILON = float(np.finfo(np.float32).eps)


class Decomposition(NamedTuple):
    translation: np.ndarray
    rotation: np.ndarray
    scale: np.ndarray


def decompose_transform(transform: Sequence[Sequence[float]] | np.ndarray) -> Decomposition:
    """Split a transform into translation, Euler rotation (radians) and scale.

    Raises ValueError when the matrix cannot be normalised.
    """
    m = np.array(transform, dtype=float)
    if m.shape != (4, 4):
        raise ValueError("transform must be a 4x4 matrix")
    if abs(m[3, 3]) < _EPSILON:
        raise ValueError("transform cannot be normalised: w component is zero")

    if np.any(np.abs(m[3, :3]) >= _EPSILON):
        m[3, :3] = 0.0
        m[3, 3] = 1.0

    translation = m[:3, 3].copy()

    axes = m[:3, :3].T.copy()
    scale = np.linalg.norm(axes, axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        axes = axes / scale[:, None]

    pitch = math.asin(float(np.clip(-axes[0][2], -1.0, 1.0)))
    if math.cos(pitch) != 0:
        roll = math.atan2(axes[1][2], axes[2][2])
        yaw = math.atan2(axes[0][1], axes[0][0])
    else:
        roll = math.atan2(-axes[2][0], axes[1][1])
        yaw = 0.0
    return Decomposition(translation, np.array([roll, pitch, yaw]), scale)


def ortho(left: float, right: float, bottom: float, top: float, near: float, far: float) -> np.ndarray:
    """Right-handed orthographic projection mapping depth to [-1, 1]."""
    m = np.identity(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection; ``fovy`` is in radians."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    tan_half = math.tan(fovy / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[3, 2] = -1.0
    m[2, 3] = -(2.0 * far * near) / (far - near)
    return m


def translate(offset: Sequence[float]) -> np.ndarray:
    m = np.identity(4)
    m[:3, 3] = np.asarray(offset, dtype=float)
    return m


def rotate(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Rotation of ``angle`` radians about ``axis``."""
    a = np.asarray(axis, dtype=float)
    length = np.linalg.norm(a)
    if length == 0:
        raise ValueError("rotation axis must not be zero")
    x, y, z = a / length
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    unit = np.array([x, y, z])
    m = np.identity(4)
    m[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * np.outer(unit, unit)
    return m


def scale(factors: Sequence[float]) -> np.ndarray:
    return np.diag([*np.asarray(factors, dtype=float), 1.0])


def euler_to_quat(euler: Sequence[float]) -> np.ndarray:
    """Quaternion for rotations about x, then y, then z (radians)."""
    half = np.asarray(euler, dtype=float) * 0.5
    cx, cy, cz = np.cos(half)
    sx, sy, sz = np.sin(half)
    return np.array(
        [
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz - cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz - sx * sy * cz,
        ]
    )


def quat_to_mat4(q: Sequence[float]) -> np.ndarray:
    w, x, y, z = (float(v) for v in q)
    m = np.identity(4)
    m[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return m


def quat_rotate(q: Sequence[float], v: Sequence[float]) -> np.ndarray:
    """Rotate a 3-vector by a quaternion."""
    return quat_to_mat4(q)[:3, :3] @ np.asarray(v, dtype=float)