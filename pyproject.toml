[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "idlmeta"
version = "0.1.0"
description = "Build, read and dump the binary metadata that describes IDL interface components"
requires-python = ">=3.10"
dependencies = []
keywords = ["idl", "metadata", "ipc", "interface definition", "serialization", "binary format"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["idlmeta"]

[tool.hatch.build.targets.sdist]
include = ["idlmeta", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
