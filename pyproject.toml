[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pathagar"
version = "0.1.0"
description = "Community book-sharing library backend: domain records, success-score and review rules, SQLite storage for books, bookmarks, donations and notifications, and Flask JSON handlers."
requires-python = ">=3.10"
keywords = ["library", "books", "lending", "community", "flask", "rest-api", "sqlite"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pathagar"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
