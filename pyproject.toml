[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xv6tools"
version = "0.1.0"
description = "User-level tools, a shell parser and a page-table model for a small teaching Unix"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "xv6",
    "unix",
    "shell",
    "grep",
    "page-table",
    "virtual-memory",
    "virtio",
    "teaching",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xv6-cat = "xv6tools.coreutils:cat_main"
xv6-echo = "xv6tools.coreutils:echo_main"
xv6-wc = "xv6tools.coreutils:wc_main"
xv6-ls = "xv6tools.coreutils:ls_main"
xv6-ln = "xv6tools.coreutils:ln_main"
xv6-mkdir = "xv6tools.coreutils:mkdir_main"
xv6-rm = "xv6tools.coreutils:rm_main"
xv6-kill = "xv6tools.coreutils:kill_main"
xv6-grep = "xv6tools.grep:main"

[tool.hatch.build.targets.wheel]
packages = ["xv6tools"]

[tool.hatch.build.targets.sdist]
include = ["xv6tools", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
