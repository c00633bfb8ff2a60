[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysutilkit"
version = "0.1.0"
description = "Concurrency primitives, object pools, a thread pool, timers and small system helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["spinlock", "object-pool", "thread-pool", "timer", "barrier", "event", "thread-local"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sysutilkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
