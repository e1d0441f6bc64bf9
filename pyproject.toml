[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "msgdispatch"
version = "0.1.0"
description = "Message queues, event dispatchers and callback registries for in-process and inter-process messaging"
requires-python = ">=3.10"
dependencies = []
keywords = ["message queue", "callback", "event dispatcher", "ipc", "threading"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
msgdispatch-demo = "msgdispatch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["msgdispatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
