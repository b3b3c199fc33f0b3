[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pslock"
version = "0.1.0"
description = "Distributed mutexes on Redis with publish/subscribe wake-ups and polling retries"
requires-python = ">=3.10"
keywords = ["redis", "lock", "mutex", "distributed", "pubsub"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "redis>=4.2",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
pslock-example = "pslock.example:main"

[tool.hatch.build.targets.wheel]
packages = ["pslock"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
