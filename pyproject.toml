[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jetcar"
version = "1.0.0"
description = "Sensor middleware for a small car: CAN speed and odometer readings, simulated battery and actuators, ZeroMQ publishing"
requires-python = ">=3.10"
keywords = ["embedded", "can", "zeromq", "sensors", "middleware", "robotics"]
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
    "Topic :: Software Development :: Embedded Systems",
]
dependencies = [
    "pyzmq",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["jetcar"]

[tool.pytest.ini_options]
addopts = "-ra"
