[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asvwaves"
version = "0.1.0"
description = "Triangle-mesh geometry, water-patch grids and ocean-tile surfaces for wave simulation of surface vessels"
requires-python = ">=3.10"
dependencies = []
keywords = ["waves", "ocean", "hydrodynamics", "mesh", "geometry", "tangent-space", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["asvwaves"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
