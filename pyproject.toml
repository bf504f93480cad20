[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tiffnotes"
version = "0.1.0"
description = "Decode TIFF structures, IFD tags and Canon/Nikon maker notes in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["tiff", "exif", "ifd", "makernote", "canon", "nikon", "metadata"]
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
    "Topic :: Multimedia :: Graphics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tiffnotes"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
