[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gfauth"
version = "0.1.0"
description = "Token authentication, role-based access rules and resource ownership checks for RPC services"
requires-python = ">=3.10"
keywords = ["authentication", "authorization", "jwt", "oidc", "jwks", "rbac", "ownership"]
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
    "Topic :: Security",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pyjwt>=2.6",
    "cryptography>=3.4",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[tool.hatch.build.targets.wheel]
packages = ["gfauth"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
