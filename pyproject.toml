[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "godis"
version = "1.2.9"
description = "Data structures and utilities for building a Redis-style key-value server: dicts, linked lists, sets, sorted sets, bitmaps, geohash, pools, locks and timers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "redis",
    "skiplist",
    "sorted-set",
    "linked-list",
    "geohash",
    "consistent-hashing",
    "snowflake",
    "time-wheel",
    "wildcard",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["godis"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
