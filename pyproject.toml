[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdfworks"
version = "0.1.0"
description = "Chromium PDF and screenshot options, form parsing and HTTP error mapping, and structured logging for a document conversion service."
requires-python = ">=3.11"
dependencies = []
keywords = ["pdf", "chromium", "screenshot", "conversion", "forms", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pdfworks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
