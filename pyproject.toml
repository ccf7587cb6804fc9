[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hysort"
version = "0.1.0"
description = "Density-based outlier detection on a grid of hypercubes, with sorted hypercube trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["outlier detection", "anomaly detection", "hypercube", "density", "data mining"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
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
hysort = "hysort.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hysort"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
