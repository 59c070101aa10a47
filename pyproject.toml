[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "usersales"
version = "0.1.0"
description = "Small in-memory users and sales HTTP services built on Flask"
requires-python = ">=3.10"
dependencies = [
    "flask",
]
keywords = ["flask", "rest", "users", "sales", "crud", "in-memory", "wsgi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
usersales = "usersales.api:main"

[tool.hatch.build.targets.wheel]
packages = ["usersales"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
