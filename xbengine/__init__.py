"""A small 2D scene engine core: events, math, cameras, 2D render batching, scenes and YAML scene files."""

__version__ = "0.1.0"