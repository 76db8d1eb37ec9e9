[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gobe"
version = "1.0.1"
description = "Backend building blocks: configuration, serialization mappers, request tracing, validation and version checks"
requires-python = ">=3.11"
keywords = [
    "backend",
    "configuration",
    "serialization",
    "validation",
    "rate-limiting",
    "telemetry",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "pyyaml>=6.0",
    "tomli-w>=1.0",
    "python-dotenv>=1.0",
    "xmltodict>=0.13",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
gobe-version = "gobe.version:main"

[tool.hatch.build.targets.wheel]
packages = ["gobe"]

[tool.hatch.build.targets.sdist]
include = ["gobe", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
ignore_missing_imports = true
