[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cukeworks"
version = "1.1.0"
description = "Building blocks for a Gherkin test runner: scoped contexts, tag sets and console/JUnit reporting."
requires-python = ">=3.10"
dependencies = []
keywords = ["bdd", "cucumber", "gherkin", "junit", "testing", "reporting"]
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
    "Topic :: Software Development :: Testing :: BDD",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cukeworks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
