[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trackvault"
version = "0.1.0"
description = "A small file-backed music catalogue with an on-disk trie index and attribute lists"
requires-python = ">=3.10"
dependencies = []
keywords = ["music", "catalog", "trie", "index", "binary-files", "database"]
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
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trackvault-init = "trackvault.setup_files:main"
trackvault-browse = "trackvault.browse:main"

[tool.hatch.build.targets.wheel]
packages = ["trackvault"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
