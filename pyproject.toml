[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mnemabi"
version = "0.1.0"
description = "Bip-buffer queues, framed queues, byte boxes and system-call message types for a kernel/userspace boundary"
requires-python = ">=3.10"
dependencies = []
keywords = ["bipbuffer", "ring-buffer", "ipc", "spsc", "queue", "syscall", "embedded"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mnemabi"]

[tool.pytest.ini_options]
addopts = "-ra"
