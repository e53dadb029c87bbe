[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "zenhost"
version = "0.1.0"
description = "Home-server host services: Samba shares, SMB connections, peers, notifications, file queues, chunked uploads and system information"
requires-python = ">=3.10"
dependencies = [
    "psutil",
    "requests",
]
keywords = ["home-server", "nas", "samba", "cifs", "system", "administration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.setuptools.packages.find]
include = ["zenhost*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
