[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "custasm"
version = "0.1.0"
description = "Core building blocks of a customizable assembler: sized big integers, bit vectors, output formats, tokens, literals, symbols and expression values"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "bitvector", "intel-hex", "mif", "symbols", "tokenizer"]
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
    "Topic :: Software Development :: Assemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["custasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
