"""An orbiting perspective camera for editing scenes."""

from __future__ import annotations

import math

import numpy as np

from .camera import Camera
from .events import Event, EventDispatcher, InputState, MouseScrolledEvent
from .mathutil import euler_to_quat, perspective, quat_rotate, quat_to_mat4, translate

KEY_LEFT_ALT = 342
MOUSE_BUTTON_LEFT = 0
MOUSE_BUTTON_RIGHT = 1
MOUSE_BUTTON_MIDDLE = 2


class EditorCamera(Camera):
    """Orbits a focal point; Alt with the mouse pans, rotates or zooms."""

    def __init__(
        self,
        fov: float = 45.0,
        aspect_ratio: float = 1.778,
        near_clip: float = 0.1,
        far_clip: float = 1000.0,
    ) -> None:
        super().__init__(perspective(math.radians(fov), aspect_ratio, near_clip, far_clip))
        self.fov = fov
        self.aspect_ratio = aspect_ratio
        self.near_clip = near_clip
        self.far_clip = far_clip
        self.view_matrix = np.identity(4)
        self.position = np.zeros(3)
        self.focal_point = np.zeros(3)
        self.initial_mouse_position = np.zeros(2)
        self.distance = 10.0
        self.pitch = 0.0
        self.yaw = 0.0
        self.viewport_width = 1200.0
        self.viewport_height = 720.0
        self._update_view()

    @property
    def view_projection(self) -> np.ndarray:
        return self.projection @ self.view_matrix

    def on_update(self, ts: float, input_state: InputState) -> None:
        if input_state.is_key_pressed(KEY_LEFT_ALT):
            mouse = np.array(input_state.mouse_position, dtype=float)
            delta = (mouse - self.initial_mouse_position) * 0.003
            self.initial_mouse_position = mouse
            if input_state.is_mouse_pressed(MOUSE_BUTTON_MIDDLE):
                self._mouse_pan(delta)
            elif input_state.is_mouse_pressed(MOUSE_BUTTON_LEFT):
                self._mouse_rotate(delta)
            elif input_state.is_mouse_pressed(MOUSE_BUTTON_RIGHT):
                self._mouse_zoom(float(delta[1]))
        self._update_view()

    def on_event(self, event: Event) -> None:
        EventDispatcher(event).dispatch(MouseScrolledEvent, self._on_mouse_scroll)

    def set_viewport_size(self, width: float, height: float) -> None:
        if self.viewport_width != width or self.viewport_height != height:
            self.viewport_width = float(width)
            self.viewport_height = float(height)
            self._update_projection()

    def orientation(self) -> np.ndarray:
        return euler_to_quat((-self.pitch, -self.yaw, 0.0))

    def up_direction(self) -> np.ndarray:
        return quat_rotate(self.orientation(), (0.0, 1.0, 0.0))

    def right_direction(self) -> np.ndarray:
        return quat_rotate(self.orientation(), (1.0, 0.0, 0.0))

    def forward_direction(self) -> np.ndarray:
        return quat_rotate(self.orientation(), (0.0, 0.0, -1.0))

    def _update_projection(self) -> None:
        if self.viewport_height == 0:
            raise ValueError("viewport height must not be zero")
        self.aspect_ratio = self.viewport_width / self.viewport_height
        self.projection = perspective(
            math.radians(self.fov), self.aspect_ratio, self.near_clip, self.far_clip
        )

    def _update_view(self) -> None:
        self.position = self.focal_point - self.forward_direction() * self.distance
        transform = translate(self.position) @ quat_to_mat4(self.orientation())
        self.view_matrix = np.linalg.inv(transform)

    def _on_mouse_scroll(self, event: MouseScrolledEvent) -> bool:
        self._mouse_zoom(event.y_offset * 0.1)
        self._update_view()
        return False

    def _mouse_pan(self, delta: np.ndarray) -> None:
        x_speed, y_speed = self._pan_speed()
        self.focal_point = self.focal_point - self.right_direction() * delta[0] * x_speed * self.distance
        self.focal_point = self.focal_point + self.up_direction() * delta[1] * y_speed * self.distance

    def _mouse_rotate(self, delta: np.ndarray) -> None:
        yaw_sign = -1.0 if self.up_direction()[1] < 0 else 1.0
        self.yaw += yaw_sign * float(delta[0]) * self._rotation_speed()
        self.pitch += float(delta[1]) * self._rotation_speed()

    def _mouse_zoom(self, delta: float) -> None:
        self.distance -= delta * self._zoom_speed()
        if self.distance < 1.0:
            self.focal_point = self.focal_point + self.forward_direction()
            self.distance = 1.0

    def _pan_speed(self) -> tuple[float, float]:
        def factor(extent: float) -> float:
            v = min(extent / 1000.0, 2.4)
            return 0.0366 * (v * v) - 0.1778 * v + 0.3021

        return factor(self.viewport_width), factor(self.viewport_height)

    @staticmethod
    def _rotation_speed() -> float:
        return 0.8

    def _zoom_speed(self) -> float:
        distance = max(self.distance * 0.2, 0.0)
        return min(distance * distance, 100.0)