[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ttpforge"
version = "0.1.0"
description = "Building blocks for defining and running Tactics, Techniques, and Procedures (TTPs) in purple team engagements"
requires-python = ">=3.10"
dependencies = []
keywords = ["purple-team", "ttp", "security", "automation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Information Technology",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ttpforge"]

[tool.pytest.ini_options]
addopts = "-ra"
