[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snlc"
version = "0.1.0"
description = "A compiler front end for SNL (Small Nested Language): lexer, parser, symbol tables, semantic checks and quadruples"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "snl", "lexer", "parser", "semantic-analysis", "symbol-table", "quadruples"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
snlc = "snlc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["snlc"]

[tool.pytest.ini_options]
addopts = "-ra"
