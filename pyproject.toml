[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "feederflow"
version = "0.1.0"
description = "Three-phase distribution feeder modelling: CSV parsers, Y-bus assembly and flat-start power mismatch and Jacobian evaluation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "power-flow",
    "load-flow",
    "distribution-feeder",
    "ybus",
    "newton-raphson",
    "jacobian",
    "three-phase",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
feederflow = "feederflow.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["feederflow"]

[tool.hatch.build.targets.sdist]
include = ["feederflow", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
