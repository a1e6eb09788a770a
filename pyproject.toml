[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minicomp"
version = "0.1.0"
description = "A small three-stage compiler: front end to code tree, tree optimizer, and stack-machine assembly generator"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "parser", "optimizer", "assembly", "syntax-tree"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minicomp-front = "minicomp.cli:front_main"
minicomp-middle = "minicomp.cli:middle_main"
minicomp-back = "minicomp.cli:back_main"

[tool.hatch.build.targets.wheel]
packages = ["minicomp"]

[tool.pytest.ini_options]
addopts = "-ra"
