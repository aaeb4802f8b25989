"""Keyboard and mouse control of a 2D orthographic camera."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .camera import OrthographicCamera
from .events import Event, EventDispatcher, InputState, MouseScrolledEvent, WindowResizeEvent

KEY_A = ord("A")
KEY_D = ord("D")
KEY_E = ord("E")
KEY_Q = ord("Q")
KEY_S = ord("S")
KEY_W = ord("W")

_MIN_ZOOM = 0.25


@dataclass
class OrthographicCameraBounds:
    left: float
    right: float
    bottom: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


class OrthographicCameraController:
    """Moves with WASD, optionally rotates with Q/E, zooms with the wheel."""

    def __init__(self, aspect_ratio: float, rotation: bool = False) -> None:
        self.aspect_ratio = aspect_ratio
        self._zoom_level = 1.0
        self.bounds = self._make_bounds()
        self.camera = OrthographicCamera(
            self.bounds.left, self.bounds.right, self.bounds.bottom, self.bounds.top
        )
        self.rotation = rotation
        self._camera_position = np.zeros(3)
        self._camera_rotation = 0.0
        self.translate_speed = 5.0
        self.rotation_speed = 45.0

    @property
    def zoom_level(self) -> float:
        return self._zoom_level

    @zoom_level.setter
    def zoom_level(self, level: float) -> None:
        self._zoom_level = level
        self._calculate_view()

    def on_update(self, ts: float, input_state: InputState) -> None:
        step = self.translate_speed * ts
        if input_state.is_key_pressed(KEY_A):
            self._camera_position[0] -= step
        elif input_state.is_key_pressed(KEY_D):
            self._camera_position[0] += step

        if input_state.is_key_pressed(KEY_W):
            self._camera_position[1] += step
        elif input_state.is_key_pressed(KEY_S):
            self._camera_position[1] -= step

        if self.rotation:
            if input_state.is_key_pressed(KEY_E):
                self._camera_rotation -= self.rotation_speed * ts
            elif input_state.is_key_pressed(KEY_Q):
                self._camera_rotation += self.rotation_speed * ts
            self.camera.rotation = self._camera_rotation

        self.camera.position = self._camera_position
        self.translate_speed = self._zoom_level

    def on_event(self, event: Event) -> None:
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(MouseScrolledEvent, self._on_mouse_scrolled)
        dispatcher.dispatch(WindowResizeEvent, self._on_window_resized)

    def on_resize(self, width: float, height: float) -> None:
        if height == 0:
            raise ValueError("height must not be zero")
        self.aspect_ratio = width / height
        self._calculate_view()

    def _make_bounds(self) -> OrthographicCameraBounds:
        z = self._zoom_level
        return OrthographicCameraBounds(-self.aspect_ratio * z, self.aspect_ratio * z, -z, z)

    def _calculate_view(self) -> None:
        self.bounds = self._make_bounds()
        self.camera.set_projection(
            self.bounds.left, self.bounds.right, self.bounds.bottom, self.bounds.top
        )

    def _on_mouse_scrolled(self, event: MouseScrolledEvent) -> bool:
        self._zoom_level = max(self._zoom_level - event.y_offset * 0.25, _MIN_ZOOM)
        self._calculate_view()
        return False

    def _on_window_resized(self, event: WindowResizeEvent) -> bool:
        self.on_resize(float(event.width), float(event.height))
        return False