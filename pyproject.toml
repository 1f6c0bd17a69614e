[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "terseterm"
version = "0.1.0"
description = "Terminal capability types, POSIX terminal I/O, key-input translation and diagnostic reports for text terminals"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "terminal",
    "tty",
    "ansi",
    "escape-sequences",
    "console",
    "keyboard",
    "device-attributes",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
terse-inspect-terminal = "terseterm.inspect:main"

[tool.hatch.build.targets.wheel]
packages = ["terseterm"]

[tool.hatch.build.targets.sdist]
include = ["terseterm", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
