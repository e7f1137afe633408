[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cpebridge"
version = "2.0.0"
description = "Codec and gateway logic for the CPE v2 encrypted sensor radio frames: AES-128 CTR frames to JSON, serial orders to control frames"
requires-python = ">=3.10"
dependencies = []
keywords = ["radio", "gateway", "aes", "ctr", "cmac", "sensor", "telemetry", "serial"]
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
    "Topic :: Communications",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cpebridge = "cpebridge.bridge:main"

[tool.hatch.build.targets.wheel]
packages = ["cpebridge"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
