"""In-memory textures and sub-regions of texture atlases."""

from __future__ import annotations

import abc
import itertools
from typing import Sequence

_renderer_ids = itertools.count(1)


class Texture(abc.ABC):
    """A texture; two textures are equal when they share a renderer id."""

    @property
    @abc.abstractmethod
    def width(self) -> int: ...

    @property
    @abc.abstractmethod
    def height(self) -> int: ...

    @property
    @abc.abstractmethod
    def renderer_id(self) -> int: ...

    @abc.abstractmethod
    def set_data(self, data: bytes) -> None: ...

    @abc.abstractmethod
    def bind(self, slot: int = 0) -> None: ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Texture):
            return NotImplemented
        return self.renderer_id == other.renderer_id

    def __hash__(self) -> int:
        return hash(self.renderer_id)


class Texture2D(Texture):
    """An RGBA8 texture held in memory."""

    BYTES_PER_PIXEL = 4

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("texture dimensions must be positive")
        self._width = width
        self._height = height
        self._renderer_id = next(_renderer_ids)
        self.data = bytes(width * height * self.BYTES_PER_PIXEL)
        self.bound_slot: int | None = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def renderer_id(self) -> int:
        return self._renderer_id

    def set_data(self, data: bytes) -> None:
        """Replace the pixel data; it must cover the whole texture."""
        raw = bytes(data)
        expected = self._width * self._height * self.BYTES_PER_PIXEL
        if len(raw) != expected:
            raise ValueError(f"data must be {expected} bytes, got {len(raw)}")
        self.data = raw

    def bind(self, slot: int = 0) -> None:
        self.bound_slot = slot

    def __repr__(self) -> str:
        return f"Texture2D({self._width}x{self._height}, id={self._renderer_id})"


Vec2 = tuple[float, float]


class SubTexture2D:
    """A rectangular region of a texture, as four corner texture coordinates."""

    def __init__(self, texture: Texture, min_coord: Sequence[float], max_coord: Sequence[float]) -> None:
        self.texture = texture
        x0, y0 = (float(v) for v in min_coord)
        x1, y1 = (float(v) for v in max_coord)
        self.tex_coords: tuple[Vec2, Vec2, Vec2, Vec2] = ((x0, y0), (x1, y0), (x1, y1), (x0, y1))

    @classmethod
    def create_from_coords(
        cls,
        texture: Texture,
        coords: Sequence[float],
        cell_size: Sequence[float],
        sprite_size: Sequence[float] = (1.0, 1.0),
    ) -> SubTexture2D:
        """Region at cell ``coords`` of ``sprite_size`` cells, each ``cell_size`` pixels."""
        cx, cy = coords
        cw, ch = cell_size
        sw, sh = sprite_size
        min_coord = ((cx * cw) / texture.width, (cy * ch) / texture.height)
        max_coord = (((cx + sw) * cw) / texture.width, ((cy + sh) * ch) / texture.height)
        return cls(texture, min_coord, max_coord)