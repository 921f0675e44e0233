[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wordchain"
version = "1.0.0"
description = "Word successor frequency analysis and Markov-chain text generation"
requires-python = ">=3.10"
dependencies = []
keywords = ["markov", "text generation", "word frequency", "red-black tree", "csv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wordchain = "wordchain.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["wordchain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
