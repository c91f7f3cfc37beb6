[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deferscope"
version = "0.1.0"
description = "Scoped deferred cleanup: register cleanup calls that run in reverse order when a scope ends."
requires-python = ">=3.10"
dependencies = []
keywords = ["defer", "cleanup", "resource management", "scope", "context manager"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
deferscope-examples = "deferscope.examples:main"

[tool.hatch.build.targets.wheel]
packages = ["deferscope"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
