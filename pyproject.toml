[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dvision"
version = "0.1.0"
description = "Computer vision utilities: BRIEF descriptors, RANSAC fundamental matrix and homography solvers, and readers and writers for Bundle, PMVS, PLY and point files"
requires-python = ">=3.10"
keywords = [
    "computer vision",
    "brief",
    "descriptor",
    "ransac",
    "fundamental matrix",
    "homography",
    "pmvs",
    "bundler",
    "ply",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
    "numpy",
]

[tool.hatch.build.targets.wheel]
packages = ["dvision"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
