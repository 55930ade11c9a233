[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "goits"
version = "0.1.0"
description = "A small double-entry bookkeeping service for accounts, transfers and journal integrity checks over HTTP."
requires-python = ">=3.10"
keywords = ["accounting", "double-entry", "bookkeeping", "ledger", "transfers", "journal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: Flask",
    "Topic :: Office/Business :: Financial :: Accounting",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]
dependencies = [
    "flask>=2.3",
    "sqlalchemy>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
goits-server = "goits.server:main"

[tool.hatch.build.targets.wheel]
packages = ["goits"]

[tool.hatch.build.targets.sdist]
include = ["goits", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
