[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "streamclust"
version = "0.1.0"
description = "Online k-median clustering of point streams by facility-location local search"
requires-python = ">=3.10"
dependencies = []
keywords = ["clustering", "k-median", "streaming", "facility location", "rand48", "barrier"]
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
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
streamclust = "streamclust.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["streamclust"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
