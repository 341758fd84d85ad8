[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "usagespec"
version = "2.1.1"
description = "Shell word completion, script caching and Fig spec generation for usage-spec based CLIs"
requires-python = ">=3.10"
dependencies = [
    "jinja2",
]
keywords = ["cli", "completion", "usage", "fig", "shell"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: User Interfaces",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["usagespec"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
