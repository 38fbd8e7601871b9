[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "depsleuth"
version = "1.9.0"
description = "Discover the third-party components of software projects from their manifests and lock files"
requires-python = ">=3.11"
dependencies = []
keywords = [
    "dependencies",
    "sca",
    "software-composition-analysis",
    "maven",
    "npm",
    "yarn",
    "nuget",
    "pip",
    "poetry",
    "security",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["depsleuth"]

[tool.hatch.build.targets.sdist]
include = ["depsleuth", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
