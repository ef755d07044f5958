[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dreamland"
version = "0.1.0"
description = "Command-line tool and Python client for a locally running multiverse of universes, services and simple nodes"
requires-python = ">=3.10"
keywords = ["dreamland", "multiverse", "universe", "local cloud", "testing", "fixtures", "cors proxy"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]
dependencies = [
    "requests>=2.28",
    "werkzeug>=2.2",
    "tabulate>=0.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
dreamland = "dreamland.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dreamland"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
