[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "visdom"
version = "0.1.0"
description = "A forgiving HTML parser with node traversal, attribute, text and tree mutation helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["html", "parser", "dom", "tree", "scraping"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Text Processing :: Markup :: HTML",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["visdom"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
