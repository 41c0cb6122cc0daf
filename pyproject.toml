[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vzporedni"
version = "0.1.0"
description = "Small, runnable demonstrations of concurrent and distributed programming: threads, queues, locks, barriers, TCP messaging, RPC, REST and clocks."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "concurrency",
    "threads",
    "synchronization",
    "dining-philosophers",
    "readers-writers",
    "producer-consumer",
    "barrier",
    "monte-carlo",
    "rpc",
    "rest",
    "ntp",
    "teaching",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
vzporedni-greetings = "vzporedni.greetings:main"
vzporedni-channels = "vzporedni.channels:main"
vzporedni-philosophers = "vzporedni.philosophers:main"
vzporedni-contention = "vzporedni.contention:main"
vzporedni-readers-writers = "vzporedni.readers_writers:main"
vzporedni-pi = "vzporedni.montecarlo:main"
vzporedni-clock = "vzporedni.clock:main"
vzporedni-barrier = "vzporedni.barrier:main"
vzporedni-producer-consumer = "vzporedni.producer_consumer:main"
vzporedni-shared-map = "vzporedni.shared_map:main"
vzporedni-storage = "vzporedni.storage:main"
vzporedni-tcp = "vzporedni.tcp_messaging:main"
vzporedni-rpc = "vzporedni.rpc:main"
vzporedni-rest = "vzporedni.rest:main"
vzporedni-ntp = "vzporedni.ntp:main"

[tool.hatch.build.targets.wheel]
packages = ["vzporedni"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
