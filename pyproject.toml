[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mecanum_car"
version = "0.1.0"
description = "Control logic for a four-wheel mecanum car: wheel speed PID, chassis kinematics and JSON command framing"
requires-python = ">=3.10"
dependencies = []
keywords = ["mecanum", "robotics", "pid", "motor-control", "kinematics", "uart", "json"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mecanum-car = "mecanum_car.app:main"

[tool.hatch.build.targets.wheel]
packages = ["mecanum_car"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
