[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "telebridge"
version = "0.1.0"
description = "Byte-framed telemetry protocol for microcontrollers, with a serial-to-MQTT bridge node"
requires-python = ">=3.10"
keywords = ["telemetry", "mqtt", "serial", "uart", "robotics", "bridge"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Communications",
    "Topic :: System :: Networking :: Monitoring",
]
dependencies = [
    "pyserial>=3.5",
    "paho-mqtt>=1.6",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
telebridge = "telebridge.bridge:main"

[tool.hatch.build.targets.wheel]
packages = ["telebridge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
