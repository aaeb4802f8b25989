"""Batched 2D drawing of quads, circles and lines."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from .mathutil import rotate, scale, translate
from .render_api import RecordingRendererAPI, RendererAPI, Shader
from .texture import SubTexture2D, Texture, Texture2D

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]

WHITE: Vec4 = (1.0, 1.0, 1.0, 1.0)

_QUAD_POSITIONS = (
    np.array([-0.5, -0.5, 0.0, 1.0]),
    np.array([0.5, -0.5, 0.0, 1.0]),
    np.array([0.5, 0.5, 0.0, 1.0]),
    np.array([-0.5, 0.5, 0.0, 1.0]),
)
_QUAD_TEX_COORDS: tuple[Vec2, Vec2, Vec2, Vec2] = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


@dataclass(frozen=True)
class QuadVertex:
    position: Vec3
    color: Vec4
    tex_coord: Vec2
    tex_index: float
    tiling_factor: float = 1.0
    entity_id: int = -1


@dataclass(frozen=True)
class CircleVertex:
    world_position: Vec3
    local_position: Vec3
    color: Vec4
    thickness: float
    fade: float
    entity_id: int = -1


@dataclass(frozen=True)
class LineVertex:
    position: Vec3
    color: Vec4
    entity_id: int = -1


@dataclass
class Statistics:
    """Draw calls and quads submitted since the last reset."""

    draw_calls: int = 0
    quad_count: int = 0

    @property
    def total_vertex_count(self) -> int:
        return self.quad_count * 4

    @property
    def total_index_count(self) -> int:
        return self.quad_count * 6


def _vec3(value: Sequence[float]) -> Vec3:
    values = [float(v) for v in value]
    if len(values) == 2:
        values.append(0.0)
    if len(values) != 3:
        raise ValueError("position must have two or three components")
    return (values[0], values[1], values[2])


def _color(value: Sequence[float]) -> Vec4:
    values = tuple(float(v) for v in value)
    if len(values) != 4:
        raise ValueError("colour must have four components")
    return values  # type: ignore[return-value]


def _matrix(value: Any) -> np.ndarray:
    m = np.array(value, dtype=float)
    if m.shape != (4, 4):
        raise ValueError("transform must be a 4x4 matrix")
    return m


def _apply(transform: np.ndarray, point: np.ndarray) -> Vec3:
    x, y, z = (transform @ point)[:3]
    return (float(x), float(y), float(z))


def _quad_transform(position: Sequence[float], size: Sequence[float], angle: float | None = None) -> np.ndarray:
    sx, sy = (float(v) for v in size)
    m = translate(_vec3(position))
    if angle is not None:
        m = m @ rotate(angle, (0.0, 0.0, 1.0))
    return m @ scale((sx, sy, 1.0))


class Renderer2D:
    """Collects 2D primitives into batches and hands them to a back end on flush."""

    MAX_QUADS = 2000
    MAX_VERTICES = MAX_QUADS * 4
    MAX_INDICES = MAX_QUADS * 6
    MAX_TEXTURE_SLOTS = 32

    def __init__(self, api: RendererAPI | None = None) -> None:
        self.api: RendererAPI = api if api is not None else RecordingRendererAPI()
        self.quad_shader = Shader("Renderer2D-Quad")
        self.circle_shader = Shader("Renderer2D-Circle")
        self.line_shader = Shader("Renderer2D-Line")
        self.white_texture = Texture2D(1, 1)
        self.white_texture.set_data(b"\xff\xff\xff\xff")
        self.line_width = 2.0
        self.view_projection = np.identity(4)
        self.stats = Statistics()
        self._texture_slots: list[Texture | None] = [None] * self.MAX_TEXTURE_SLOTS
        self._texture_slots[0] = self.white_texture
        self._texture_slot_index = 1
        self._quad_vertices: list[QuadVertex] = []
        self._circle_vertices: list[CircleVertex] = []
        self._line_vertices: list[LineVertex] = []
        self._quad_index_count = 0
        self._circle_index_count = 0

    @property
    def texture_slots(self) -> tuple[Texture, ...]:
        """Textures in use by the current batch, slot 0 being the white texture."""
        return tuple(t for t in self._texture_slots[: self._texture_slot_index] if t is not None)

    def begin_scene(self, view_projection: Sequence[Sequence[float]] | np.ndarray) -> None:
        """Start a scene seen through ``view_projection``."""
        self.view_projection = _matrix(view_projection)
        for shader in (self.quad_shader, self.circle_shader, self.line_shader):
            shader.set_mat4("u_ViewProjection", self.view_projection)
        self._start_batch()

    def end_scene(self) -> None:
        self.flush()

    def flush(self) -> None:
        """Submit every non-empty batch to the back end."""
        if self._quad_index_count:
            for slot, texture in enumerate(self._texture_slots[: self._texture_slot_index]):
                if texture is not None:
                    texture.bind(slot)
            self.quad_shader.bind()
            self.api.draw_indexed("quad", self._quad_vertices, self._quad_index_count)
            self.stats.draw_calls += 1
        if self._circle_index_count:
            self.circle_shader.bind()
            self.api.draw_indexed("circle", self._circle_vertices, self._circle_index_count)
            self.stats.draw_calls += 1
        if self._line_vertices:
            self.line_shader.bind()
            self.api.set_line_width(self.line_width)
            self.api.draw_lines("line", self._line_vertices, len(self._line_vertices))
            self.stats.draw_calls += 1

    def draw_quad(
        self,
        position: Sequence[float],
        size: Sequence[float],
        color: Sequence[float] = WHITE,
        texture: Texture | None = None,
        tiling_factor: float = 1.0,
    ) -> None:
        """Draw an axis-aligned quad centred on ``position``; ``color`` tints a texture."""
        self.draw_quad_transform(_quad_transform(position, size), color, texture, tiling_factor)

    def draw_quad_transform(
        self,
        transform: Sequence[Sequence[float]] | np.ndarray,
        color: Sequence[float] = WHITE,
        texture: Texture | None = None,
        tiling_factor: float = 1.0,
        entity_id: int = -1,
    ) -> None:
        """Draw the unit quad under ``transform``, plain or textured."""
        m = _matrix(transform)
        tint = _color(color)
        self._reserve_quad()
        if texture is None:
            tex_index, tiling = 0.0, 1.0
        else:
            tex_index, tiling = self._texture_index(texture), float(tiling_factor)
        self._push_quad(m, tint, _QUAD_TEX_COORDS, tex_index, tiling, entity_id)

    def draw_sub_texture_quad(
        self,
        position: Sequence[float],
        size: Sequence[float],
        sub_texture: SubTexture2D,
        tiling_factor: float = 1.0,
    ) -> None:
        """Draw a quad showing a region of a texture atlas."""
        m = _quad_transform(position, size)
        self._reserve_quad()
        tex_index = self._texture_index(sub_texture.texture)
        self._push_quad(m, WHITE, sub_texture.tex_coords, tex_index, float(tiling_factor), -1)

    def draw_rotated_quad(
        self,
        position: Sequence[float],
        size: Sequence[float],
        rotation: float,
        color: Sequence[float] = WHITE,
        texture: Texture | None = None,
        tiling_factor: float = 1.0,
    ) -> None:
        """Draw a quad rotated about z.

        ``rotation`` is in radians for a plain quad and in degrees for a textured one.
        """
        if texture is None:
            self.draw_quad_transform(_quad_transform(position, size, rotation), color)
        else:
            m = _quad_transform(position, size, math.radians(rotation))
            self.draw_quad_transform(m, color, texture, tiling_factor)

    def draw_circle(
        self,
        transform: Sequence[Sequence[float]] | np.ndarray,
        color: Sequence[float],
        thickness: float = 1.0,
        fade: float = 0.005,
        entity_id: int = -1,
    ) -> None:
        m = _matrix(transform)
        tint = _color(color)
        if self._circle_index_count >= self.MAX_INDICES:
            self._flush_and_reset()
        for corner in _QUAD_POSITIONS:
            self._circle_vertices.append(
                CircleVertex(
                    _apply(m, corner),
                    _apply(np.identity(4), corner * 2.0),
                    tint,
                    float(thickness),
                    float(fade),
                    entity_id,
                )
            )
        self._circle_index_count += 6
        self.stats.quad_count += 1

    def draw_sprite(self, transform: Sequence[Sequence[float]] | np.ndarray, sprite: Any, entity_id: int = -1) -> None:
        """Draw a sprite component: textured if it has a texture, else its colour."""
        if sprite.texture is not None:
            self.draw_quad_transform(transform, sprite.color, sprite.texture, 1.0, entity_id)
        else:
            self.draw_quad_transform(transform, sprite.color, entity_id=entity_id)

    def draw_line(
        self,
        p0: Sequence[float],
        p1: Sequence[float],
        color: Sequence[float],
        entity_id: int = -1,
    ) -> None:
        tint = _color(color)
        if len(self._line_vertices) + 2 > self.MAX_VERTICES:
            self._flush_and_reset()
        self._line_vertices.append(LineVertex(_vec3(p0), tint, entity_id))
        self._line_vertices.append(LineVertex(_vec3(p1), tint, entity_id))

    def draw_rect(
        self,
        position: Sequence[float],
        size: Sequence[float],
        color: Sequence[float],
        entity_id: int = -1,
    ) -> None:
        """Outline an axis-aligned rectangle centred on ``position``."""
        x, y, z = _vec3(position)
        hw, hh = (float(v) * 0.5 for v in size)
        corners = [(x - hw, y - hh, z), (x + hw, y - hh, z), (x + hw, y + hh, z), (x - hw, y + hh, z)]
        self._outline(corners, color, entity_id)

    def draw_rect_transform(
        self,
        transform: Sequence[Sequence[float]] | np.ndarray,
        color: Sequence[float],
        entity_id: int = -1,
    ) -> None:
        """Outline the unit quad under ``transform``."""
        m = _matrix(transform)
        self._outline([_apply(m, corner) for corner in _QUAD_POSITIONS], color, entity_id)

    def reset_stats(self) -> None:
        self.stats = Statistics()

    def _outline(self, corners: list[Vec3], color: Sequence[float], entity_id: int) -> None:
        for start, end in zip(corners, corners[1:] + corners[:1]):
            self.draw_line(start, end, color, entity_id)

    def _start_batch(self) -> None:
        self._quad_vertices = []
        self._circle_vertices = []
        self._line_vertices = []
        self._quad_index_count = 0
        self._circle_index_count = 0
        self._texture_slot_index = 1

    def _flush_and_reset(self) -> None:
        self.end_scene()
        self._start_batch()

    def _reserve_quad(self) -> None:
        if self._quad_index_count >= self.MAX_INDICES:
            self._flush_and_reset()

    def _texture_index(self, texture: Texture) -> float:
        index = 0
        for slot, existing in enumerate(self._texture_slots[: self._texture_slot_index]):
            if existing == texture:
                index = slot
                break
        if index == 0:
            if self._texture_slot_index >= self.MAX_TEXTURE_SLOTS:
                self._flush_and_reset()
            index = self._texture_slot_index
            self._texture_slots[index] = texture
            self._texture_slot_index += 1
        return float(index)

    def _push_quad(
        self,
        transform: np.ndarray,
        color: Vec4,
        tex_coords: Sequence[Vec2],
        tex_index: float,
        tiling_factor: float,
        entity_id: int,
    ) -> None:
        for corner, tex_coord in zip(_QUAD_POSITIONS, tex_coords):
            self._quad_vertices.append(
                QuadVertex(
                    _apply(transform, corner),
                    color,
                    (float(tex_coord[0]), float(tex_coord[1])),
                    tex_index,
                    tiling_factor,
                    entity_id,
                )
            )
        self._quad_index_count += 6
        self.stats.quad_count += 1