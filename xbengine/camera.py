"""Cameras: a plain projection holder, a 2D orthographic camera and the scene camera."""

from __future__ import annotations

import enum
import math
from typing import Sequence

import numpy as np

from .mathutil import ortho, perspective, rotate, translate


class Camera:
    """Holds a projection matrix."""

    def __init__(self, projection: Sequence[Sequence[float]] | np.ndarray | None = None) -> None:
        self.projection = np.identity(4) if projection is None else np.array(projection, dtype=float)


class OrthographicCamera:
    """A 2D camera with a position and a rotation about the z axis in degrees."""

    def __init__(self, left: float, right: float, bottom: float, top: float) -> None:
        self._position = np.zeros(3)
        self._rotation = 0.0
        self.projection_matrix = ortho(left, right, bottom, top, -1.0, 1.0)
        self.view_matrix = np.identity(4)
        self.view_projection_matrix = self.projection_matrix @ self.view_matrix

    def set_projection(self, left: float, right: float, bottom: float, top: float) -> None:
        self.projection_matrix = ortho(left, right, bottom, top, -1.0, 1.0)
        self.view_projection_matrix = self.projection_matrix @ self.view_matrix

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        self._position = np.array(value, dtype=float)
        self._recalculate_view_matrix()

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = float(value)
        self._recalculate_view_matrix()

    def _recalculate_view_matrix(self) -> None:
        transform = translate(self._position) @ rotate(math.radians(self._rotation), (0.0, 0.0, 1.0))
        self.view_matrix = np.linalg.inv(transform)
        self.view_projection_matrix = self.projection_matrix @ self.view_matrix


class ProjectionType(enum.Enum):
    PERSPECTIVE = 0
    ORTHOGRAPHIC = 1


class SceneCamera(Camera):
    """A camera owned by a scene entity, either perspective or orthographic.

    Changing a parameter attribute directly does not rebuild the projection;
    call ``recalculate_projection`` afterwards, or use the ``set_*`` methods.
    """

    def __init__(self) -> None:
        super().__init__()
        self.projection_type = ProjectionType.ORTHOGRAPHIC
        self.perspective_fov = math.radians(45.0)
        self.perspective_near = 0.01
        self.perspective_far = 100.0
        self.orthographic_size = 10.0
        self.orthographic_near = -1.0
        self.orthographic_far = 1.0
        self.aspect_ratio = 1.0
        self.recalculate_projection()

    def set_viewport_size(self, width: int, height: int) -> None:
        if height == 0:
            raise ValueError("viewport height must not be zero")
        self.aspect_ratio = float(width) / float(height)
        self.recalculate_projection()

    def set_orthographic(self, size: float, near_clip: float, far_clip: float) -> None:
        self.projection_type = ProjectionType.ORTHOGRAPHIC
        self.orthographic_size = size
        self.orthographic_near = near_clip
        self.orthographic_far = far_clip
        self.recalculate_projection()

    def set_perspective(self, vertical_fov: float, near_clip: float, far_clip: float) -> None:
        """Switch to perspective; ``vertical_fov`` is in radians."""
        self.projection_type = ProjectionType.PERSPECTIVE
        self.perspective_fov = vertical_fov
        self.perspective_near = near_clip
        self.perspective_far = far_clip
        self.recalculate_projection()

    def recalculate_projection(self) -> None:
        if self.projection_type is ProjectionType.PERSPECTIVE:
            self.projection = perspective(
                self.perspective_fov, self.aspect_ratio, self.perspective_near, self.perspective_far
            )
        else:
            half_height = self.orthographic_size * 0.5
            half_width = self.orthographic_size * self.aspect_ratio * 0.5
            self.projection = ortho(
                -half_width,
                half_width,
                -half_height,
                half_height,
                self.orthographic_near,
                self.orthographic_far,
            )