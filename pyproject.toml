[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "profoc"
version = "0.1.0"
description = "Forecast-scoring losses, array helpers and numerical optimizers (gradient descent, differential evolution, particle swarm, line search)"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = [
    "optimization",
    "gradient descent",
    "adam",
    "differential evolution",
    "particle swarm",
    "line search",
    "numerical hessian",
    "quantile loss",
    "expectile loss",
    "forecast combination",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["profoc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
