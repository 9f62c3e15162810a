[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plantation"
version = "0.1.0"
description = "HTTP service for managing plantation estates, their trees and drone patrol plans"
requires-python = ">=3.10"
keywords = ["plantation", "estate", "drone", "http", "rest", "flask"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "sqlalchemy",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
plantation-server = "plantation.app:main"

[tool.hatch.build.targets.wheel]
packages = ["plantation"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
