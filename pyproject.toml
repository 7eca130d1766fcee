[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "talentchain"
version = "0.1.0"
description = "In-memory talent marketplace: profiles, paid contact requests, job boards, hiring rewards and resume listings"
requires-python = ">=3.10"
dependencies = []
keywords = ["hiring", "jobs", "referrals", "escrow", "rewards", "profiles", "resume"]
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
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["talentchain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
