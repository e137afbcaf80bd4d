[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "partkit"
version = "0.1.0"
description = "Graph and mesh file handling, synthetic load changes and partition-driven graph redistribution for distributed graph partitioning workflows"
requires-python = ">=3.10"
dependencies = []
keywords = ["graph", "partitioning", "mesh", "metis", "csr", "redistribution"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["partkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
