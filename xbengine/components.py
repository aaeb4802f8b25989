"""Components that scene entities carry."""

from __future__ import annotations

import enum
import secrets
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from . import mathutil
from .camera import SceneCamera
from .texture import Texture

Vec2 = tuple[float, float]
Vec4 = tuple[float, float, float, float]


def new_uuid() -> int:
    """A random 64-bit identifier."""
    return secrets.randbits(64)


def _vec3(*values: float) -> Any:
    return field(default_factory=lambda: np.array(values, dtype=float))


@dataclass
class IDComponent:
    id: int = field(default_factory=new_uuid)


@dataclass
class TagComponent:
    tag: str = ""


@dataclass(eq=False)
class TransformComponent:
    """Translation, Euler rotation in radians, and scale."""

    translation: np.ndarray = _vec3(0.0, 0.0, 0.0)
    rotation: np.ndarray = _vec3(0.0, 0.0, 0.0)
    scale: np.ndarray = _vec3(1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        self.translation = np.array(self.translation, dtype=float)
        self.rotation = np.array(self.rotation, dtype=float)
        self.scale = np.array(self.scale, dtype=float)

    @property
    def transform(self) -> np.ndarray:
        """The 4x4 matrix: translate, then rotate, then scale."""
        rotation = mathutil.quat_to_mat4(mathutil.euler_to_quat(self.rotation))
        return mathutil.translate(self.translation) @ rotation @ mathutil.scale(self.scale)


@dataclass
class CircleRendererComponent:
    color: Vec4 = (1.0, 1.0, 1.0, 1.0)
    thickness: float = 1.0
    fade: float = 0.005


@dataclass
class SpriteRendererComponent:
    color: Vec4 = (1.0, 1.0, 1.0, 1.0)
    texture: Texture | None = None
    tiling_factor: float = 1.0


@dataclass
class CameraComponent:
    camera: SceneCamera = field(default_factory=SceneCamera)
    primary: bool = True
    fixed_aspect_ratio: bool = False


@dataclass
class NativeScriptComponent:
    """Binds a script class to an entity; the scene creates the instance lazily."""

    instance: Any = None
    script_class: type | None = None

    def bind(self, script_class: type) -> None:
        self.script_class = script_class

    def instantiate(self) -> Any:
        if self.script_class is None:
            raise RuntimeError("no script class is bound")
        self.instance = self.script_class()
        return self.instance

    def destroy(self) -> None:
        self.instance = None


class BodyType(enum.Enum):
    STATIC = 0
    KINEMATIC = 1
    DYNAMIC = 2


@dataclass
class Rigidbody2DComponent:
    body_type: BodyType = BodyType.STATIC
    fixed_rotation: bool = False
    runtime_body: Any = None


@dataclass
class BoxCollider2DComponent:
    offset: Vec2 = (0.0, 0.0)
    size: Vec2 = (0.5, 0.5)
    density: float = 1.0
    friction: float = 0.5
    restitution: float = 0.0


@dataclass
class CircleCollider2DComponent:
    offset: Vec2 = (0.0, 0.0)
    radius: float = 0.5
    density: float = 1.0
    friction: float = 0.5
    restitution: float = 0.0