[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "teeverifier"
version = "0.1.0"
description = "Parse TEE attestation evidence into claims: SGX and TDX quotes, CC event logs and sample evidence."
requires-python = ">=3.10"
dependencies = []
keywords = ["attestation", "tee", "sgx", "tdx", "confidential-computing", "quote", "eventlog"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["teeverifier"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
