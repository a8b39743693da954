[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edgehog_runtime"
version = "0.1.0"
description = "Asyncio device runtime pieces: LED blink behaviours, remote forwarder sessions and runtime options"
requires-python = ">=3.10"
dependencies = []
keywords = ["iot", "device-management", "edge", "led", "forwarder", "asyncio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["edgehog_runtime"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
