[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diskscan"
version = "0.1.0"
description = "Concurrent directory tree scanner that counts files, directories and bytes, with optional name filtering"
requires-python = ">=3.10"
dependencies = []
keywords = ["disk", "scanner", "filesystem", "directory", "usage", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
diskscan = "diskscan.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["diskscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
