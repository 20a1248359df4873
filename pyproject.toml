[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mp4boxes"
version = "0.1.0"
description = "ISO base media file format (MP4) box definitions, a box type registry and box header reading and writing"
requires-python = ">=3.10"
dependencies = []
keywords = ["mp4", "isobmff", "quicktime", "box", "atom", "video", "container"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mp4boxes"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
