[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nesasmkit"
version = "0.1.0"
description = "Building blocks of a 6502 assembler for NES and PC-Engine ROMs, with sound-chip register helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "pc-engine", "6502", "assembler", "ines", "mml", "s-record", "chiptune"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Assemblers",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nesasmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
