[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cortexmem"
version = "1.4.0"
description = "Persistent memory for AI coding agents: auto-tagging, deduplication, memory tiers, hybrid search and sync"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = [
    "memory",
    "vector-search",
    "ai-agents",
    "embeddings",
    "full-text-search",
    "rank-fusion",
    "sync",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["cortexmem"]

[tool.hatch.build.targets.sdist]
include = ["cortexmem", "tests"]

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
