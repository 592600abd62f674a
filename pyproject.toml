[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshstake"
version = "0.1.0"
description = "In-memory staking contract logic for mesh security providers: native staking, per-user staking proxies, stake accounting and reward alignment"
requires-python = ">=3.10"
dependencies = []
keywords = ["staking", "mesh-security", "slashing", "delegation", "rewards"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["meshstake"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
