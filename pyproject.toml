[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dicekv"
version = "0.1.0"
description = "Building blocks of an in-memory key-value server: RESP codec, varints, compact deques, bitmaps, bloom filters and sessions"
requires-python = ">=3.10"
dependencies = [
    "bcrypt",
]
keywords = ["resp", "key-value", "bloom-filter", "varint", "deque", "bitmap", "murmur3"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["dicekv"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
