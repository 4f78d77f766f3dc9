[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clarikit"
version = "0.1.0"
description = "Helpers for Clarity smart-contract projects: manifests, cost reports, test-run bookkeeping and build glue"
requires-python = ">=3.11"
keywords = ["clarity", "stacks", "smart-contracts", "testing", "costs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]
dependencies = [
    "pycryptodome",
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["clarikit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
