[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hooktext"
version = "0.1.0"
description = "Sentence filters, block markup files, hook codes and text threads for text extracted from running programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["text", "filter", "translation", "hook code", "deduplication", "replacement"]
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
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hooktext"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 110
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
