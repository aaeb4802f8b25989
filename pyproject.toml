[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xbengine"
version = "0.1.0"
description = "A small 2D scene engine core: events, cameras, batched 2D rendering data, entity scenes and YAML scene files."
requires-python = ">=3.10"
keywords = ["game engine", "2d", "scene", "entity component", "renderer", "camera"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "numpy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["xbengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
