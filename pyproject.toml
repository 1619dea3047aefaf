[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "multirogue"
version = "0.1.0"
description = "A multiplayer Rogue-like dungeon game served over WebSockets."
requires-python = ">=3.10"
keywords = ["rogue", "roguelike", "multiplayer", "websocket", "game", "dungeon"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]
dependencies = [
    "aiohttp>=3.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
]

[project.scripts]
multirogue = "multirogue.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["multirogue"]

[tool.pytest.ini_options]
addopts = "-ra"
