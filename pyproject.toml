[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "bitchess"
version = "0.1.0"
description = "Bitboard chess move generator with magic-number slider attacks and perft testing"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "bitboard", "move-generation", "perft", "magic-bitboards"]
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
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bitchess-perft = "bitchess.perft:main"

[tool.setuptools.packages.find]
include = ["bitchess*"]

[tool.pytest.ini_options]
addopts = "-ra"
