[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zxpico"
version = "0.1.0"
description = "ZX Spectrum display encoding, key matrix scanning and settings for small microcontroller boards"
requires-python = ">=3.10"
dependencies = []
keywords = ["zx-spectrum", "emulator", "vga", "scanline", "st7789", "keyboard-matrix"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zxpico"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
