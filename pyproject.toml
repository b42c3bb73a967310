[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sicasm"
version = "0.1.0"
description = "A two-pass assembler and an interactive simulator for the SIC machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["sic", "assembler", "simulator", "object-program", "systems-programming"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Assemblers",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sicasm = "sicasm.assembler:main"
sicsim = "sicasm.simulator:main"

[tool.hatch.build.targets.wheel]
packages = ["sicasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
