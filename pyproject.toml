[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cavequest"
version = "0.1.0"
description = "A small side-scrolling cave platformer with Tiled TMX maps and tile collision"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "platformer", "pygame", "tmx", "tiled", "collision"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cavequest = "cavequest.game:main"

[tool.hatch.build.targets.wheel]
packages = ["cavequest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
