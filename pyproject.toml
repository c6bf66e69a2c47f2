[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ubw"
version = "0.1.0"
description = "A small concurrent HTTP/1.1 load generator that reports response classes every second"
requires-python = ">=3.10"
dependencies = [
    "h11",
]
keywords = ["http", "load-testing", "benchmark", "traffic", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Testing :: Traffic Generation",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
ubw = "ubw.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ubw"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
