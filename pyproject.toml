[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nkernel"
version = "0.1.0"
description = "Containers, FIFO synchronisation primitives, tasks, synchronous messages and a sealed-bid auction for Python threads"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "threads",
    "semaphore",
    "mutex",
    "condition variable",
    "monitor",
    "message passing",
    "priority queue",
    "auction",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nkernel-auction = "nkernel.auction:main"

[tool.hatch.build.targets.wheel]
packages = ["nkernel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
