[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rfslam"
version = "0.1.0"
description = "Building blocks for random-finite-set SLAM: OSPA/COLA set metrics, Gaussian process models, pose trajectories and an extended Kalman filter for landmarks"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = ["slam", "robotics", "kalman-filter", "ospa", "cola", "process-model", "random-finite-sets"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rfslam"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
