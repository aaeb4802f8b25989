"""Rendering back end interface, shaders, and frame buffer specifications."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

import numpy as np


class GraphicsAPI(enum.Enum):
    """The graphics interface a renderer targets."""

    NONE = 0
    OPENGL = 1


class RendererAPI(abc.ABC):
    """Low-level drawing commands that a back end carries out."""

    api: GraphicsAPI = GraphicsAPI.OPENGL

    @abc.abstractmethod
    def init(self) -> None:
        """Prepare the back end for drawing."""

    @abc.abstractmethod
    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        """Set the region of the target that drawing maps to."""

    @abc.abstractmethod
    def set_clear_color(self, color: Sequence[float]) -> None:
        """Set the RGBA colour used by ``clear``."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Clear the colour and depth of the target."""

    @abc.abstractmethod
    def draw_indexed(self, batch: str, vertices: Sequence[Any], index_count: int = 0) -> None:
        """Draw triangles of ``batch`` from ``vertices`` using ``index_count`` indices."""

    @abc.abstractmethod
    def draw_lines(self, batch: str, vertices: Sequence[Any], vertex_count: int) -> None:
        """Draw line segments of ``batch`` from the first ``vertex_count`` vertices."""

    @abc.abstractmethod
    def set_line_width(self, width: float) -> None:
        """Set the width of lines drawn afterwards."""


@dataclass(frozen=True)
class DrawCall:
    """One recorded draw command."""

    kind: str
    batch: str
    vertices: tuple[Any, ...]
    count: int
    line_width: float


class RecordingRendererAPI(RendererAPI):
    """A back end that keeps its state and every draw command in memory."""

    def __init__(self) -> None:
        self.initialized = False
        self.viewport: tuple[int, int, int, int] = (0, 0, 0, 0)
        self.clear_color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
        self.clear_count = 0
        self.line_width = 1.0
        self.draw_calls: list[DrawCall] = []

    def init(self) -> None:
        self.initialized = True

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("viewport size must not be negative")
        self.viewport = (x, y, width, height)

    def set_clear_color(self, color: Sequence[float]) -> None:
        values = tuple(float(c) for c in color)
        if len(values) != 4:
            raise ValueError("clear colour must have four components")
        self.clear_color = values  # type: ignore[assignment]

    def clear(self) -> None:
        self.clear_count += 1

    def draw_indexed(self, batch: str, vertices: Sequence[Any], index_count: int = 0) -> None:
        self.draw_calls.append(
            DrawCall("indexed", batch, tuple(vertices), index_count, self.line_width)
        )

    def draw_lines(self, batch: str, vertices: Sequence[Any], vertex_count: int) -> None:
        self.draw_calls.append(
            DrawCall("lines", batch, tuple(vertices), vertex_count, self.line_width)
        )

    def set_line_width(self, width: float) -> None:
        if width <= 0:
            raise ValueError("line width must be positive")
        self.line_width = float(width)


class Shader:
    """A named shader program with its source and the uniforms set on it."""

    def __init__(self, name: str, vertex_src: str = "", fragment_src: str = "", source: str = "") -> None:
        self.name = name
        self.vertex_src = vertex_src
        self.fragment_src = fragment_src
        self.source = source
        self.uniforms: dict[str, Any] = {}
        self.bound = False

    @classmethod
    def from_file(cls, filepath: str | Path) -> Shader:
        """Load a shader file; its name is the file name without extension."""
        path = Path(filepath)
        return cls(path.stem, source=path.read_text(encoding="utf-8"))

    def bind(self) -> None:
        self.bound = True

    def unbind(self) -> None:
        self.bound = False

    def set_int(self, name: str, value: int) -> None:
        self.uniforms[name] = int(value)

    def set_int_array(self, name: str, values: Iterable[int]) -> None:
        self.uniforms[name] = tuple(int(v) for v in values)

    def set_float(self, name: str, value: float) -> None:
        self.uniforms[name] = float(value)

    def set_float3(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = self._vector(value, 3)

    def set_float4(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = self._vector(value, 4)

    def set_mat4(self, name: str, value: Sequence[Sequence[float]] | np.ndarray) -> None:
        matrix = np.array(value, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError("matrix uniform must be 4x4")
        self.uniforms[name] = matrix

    @staticmethod
    def _vector(value: Sequence[float], size: int) -> tuple[float, ...]:
        values = tuple(float(v) for v in value)
        if len(values) != size:
            raise ValueError(f"vector uniform must have {size} components")
        return values

    def __repr__(self) -> str:
        return f"Shader({self.name!r})"


class ShaderLibrary:
    """Shaders stored by name."""

    def __init__(self) -> None:
        self._shaders: dict[str, Shader] = {}

    def add(self, shader: Shader, name: str | None = None) -> None:
        """Store ``shader`` under ``name``, or its own name; names must be unique."""
        key = shader.name if name is None else name
        if key in self._shaders:
            raise ValueError(f"shader already exists: {key!r}")
        self._shaders[key] = shader

    def load(self, filepath: str | Path, name: str | None = None) -> Shader:
        shader = Shader.from_file(filepath)
        self.add(shader, name)
        return shader

    def get(self, name: str) -> Shader:
        try:
            return self._shaders[name]
        except KeyError:
            raise KeyError(f"shader not found: {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._shaders

    def __len__(self) -> int:
        return len(self._shaders)


class FramebufferTextureFormat(enum.Enum):
    NONE = 0
    RGBA8 = 1
    RED_INTEGER = 2
    DEPTH24STENCIL8 = 3
    DEPTH = 3


@dataclass
class FramebufferTextureSpecification:
    texture_format: FramebufferTextureFormat = FramebufferTextureFormat.NONE


@dataclass
class FrameBufferSpecification:
    """Size, sampling and attachments of a frame buffer."""

    width: int = 1280
    height: int = 720
    samples: int = 1
    swap_chain_target: bool = False
    attachments: list[FramebufferTextureSpecification] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.attachments = [
            a if isinstance(a, FramebufferTextureSpecification) else FramebufferTextureSpecification(a)
            for a in self.attachments
        ]