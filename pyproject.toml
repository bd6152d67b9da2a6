[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stashtrade"
version = "0.1.0"
description = "Path of Exile public stash parsing, stash diffing, stash sinks and a trade offer search API"
requires-python = ">=3.10"
keywords = [
    "path-of-exile",
    "stash",
    "trade",
    "public-stash-tabs",
    "change-id",
    "asgi",
]
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
    "Topic :: Games/Entertainment :: Role-Playing",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "requests",
    "pika",
    "starlette",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
    "httpx",
]

[tool.hatch.build.targets.wheel]
packages = ["stashtrade"]

[tool.hatch.build.targets.sdist]
include = ["stashtrade", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
