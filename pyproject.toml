[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hooklangs"
version = "0.1.0"
description = "Language version requests, Node.js toolchain installation and hook helpers for git hook runners"
requires-python = ">=3.10"
dependencies = [
    "filelock",
]
keywords = ["git", "hooks", "pre-commit", "toolchain", "semver", "python", "node", "go", "pygrep"]
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
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hooklangs"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
