[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "notpass"
version = "0.1.0"
description = "Read Password Safe v3 vaults and generate random passphrases"
requires-python = ">=3.11"
dependencies = [
    "pycryptodome",
]
keywords = [
    "password",
    "password-safe",
    "psafe3",
    "passphrase",
    "twofish",
    "vault",
    "yubikey",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
phrases = "notpass.phrases:main"
pwsafe = "notpass.pwsafe:main"

[tool.hatch.build.targets.wheel]
packages = ["notpass"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
