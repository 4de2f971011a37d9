[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "multiserv"
version = "0.1.0"
description = "A small select()-based TCP server that listens on several ports, greets clients and echoes what they send"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "server", "select", "echo", "sockets"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
multiserv = "multiserv.master:main"
multiserv-single = "multiserv.single:main"

[tool.hatch.build.targets.wheel]
packages = ["multiserv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
