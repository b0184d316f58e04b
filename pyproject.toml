[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arduino-cloud-compiler"
version = "0.1.0"
description = "Socket.IO server that runs arduino-cli commands (board listing, core installs, compile, upload) on behalf of remote clients"
requires-python = ">=3.10"
keywords = ["arduino", "arduino-cli", "esp32", "socket.io", "compiler", "server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Embedded Systems",
]
dependencies = [
    "aiohttp>=3.8",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "pytest-asyncio>=0.21",
]

[project.scripts]
arduino-cloud-compiler = "arduino_cloud_compiler.server:main"

[tool.hatch.build.targets.wheel]
packages = ["arduino_cloud_compiler"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
