[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dablock"
version = "0.1.0"
description = "Data-availability block layout, erasure coding, KZG commitments and column recovery over BLS12-381"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "data-availability",
    "erasure-coding",
    "kzg",
    "bls12-381",
    "fft",
    "polynomial-commitment",
    "chacha20",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dablock"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
