[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvkit"
version = "0.1.0"
description = "Tools for a small teaching Unix: file system image builder, on-disk layout, MMU and ELF structures, and the classic user utilities"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "filesystem",
    "disk-image",
    "mkfs",
    "elf",
    "x86",
    "mmu",
    "shell",
    "grep",
    "teaching-os",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Education",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xvkit-mkfs = "xvkit.mkfs:main"
xvkit-grep = "xvkit.grep:main"
xvkit-wc = "xvkit.wc:main"
xvkit-cat = "xvkit.cat:main"
xvkit-echo = "xvkit.echo:main"
xvkit-ls = "xvkit.ls:main"

[tool.hatch.build.targets.wheel]
packages = ["xvkit"]

[tool.hatch.build.targets.sdist]
include = ["xvkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
