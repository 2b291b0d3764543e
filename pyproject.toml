[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labkit"
version = "0.1.0"
description = "Small systems-programming exercises: linked lists, an LFSR, matrix loop orderings, threshold sums, threaded dot products, BMP images, a Sobel filter and a tiny HTTP file server"
requires-python = ">=3.10"
keywords = [
    "education",
    "exercises",
    "linked-list",
    "lfsr",
    "matrix",
    "threads",
    "bmp",
    "sobel",
    "http-server",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
labkit-matrix = "labkit.matrix:main"
labkit-simd = "labkit.simd:main"
labkit-parallel = "labkit.parallel:main"
labkit-server = "labkit.server:main"

[tool.hatch.build.targets.wheel]
packages = ["labkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
