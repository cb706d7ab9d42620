[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imgate"
version = "0.1.0"
description = "Building blocks for an instant-messaging gateway: channels, routing, service records, node selection, logging and load reports"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "gateway", "instant-messaging", "router", "service-discovery", "benchmark"]
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
    "Topic :: Communications :: Chat",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["imgate"]

[tool.pytest.ini_options]
addopts = "-ra"
