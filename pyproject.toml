[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "feel"
version = "0.1.0"
description = "A gRPC core server that routes read and write requests by interface id to plugins, plus a feature client that drives it."
requires-python = ">=3.10"
keywords = ["grpc", "plugins", "giid", "server", "logging", "feature"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "grpcio",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
feel-core = "feel.core_app:main"
feel-feature = "feel.feature_app:main"

[tool.hatch.build.targets.wheel]
packages = ["feel"]

[tool.pytest.ini_options]
addopts = "-ra"
