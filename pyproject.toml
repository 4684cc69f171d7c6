[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lightws"
version = "0.1.0"
description = "A small, dependency-free WebSocket client with callback-based receiving"
requires-python = ">=3.10"
dependencies = []
keywords = ["websocket", "client", "ws", "rfc6455", "networking"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lightws = "lightws.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lightws"]

[tool.pytest.ini_options]
addopts = "-ra"
