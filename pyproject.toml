[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cupra_scene"
version = "0.1.0"
description = "Wavefront OBJ loading, transform helpers, an orbiting camera, scene animation and quiz page flow for an animated car showcase"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["obj", "mtl", "wavefront", "mesh", "camera", "animation", "3d"]
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
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cupra-model = "cupra_scene.model:main"

[tool.hatch.build.targets.wheel]
packages = ["cupra_scene"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
