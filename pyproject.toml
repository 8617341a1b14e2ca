[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qlemukit"
version = "0.1.0"
description = "Building blocks for a Sinclair QL emulator: options, ROM and screen memory layout, display geometry, block device, clock and tracing helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["sinclair", "ql", "qdos", "emulator", "68000", "minerva"]
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
    "Topic :: System :: Emulators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qlemukit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
