"""Parsing of TEE attestation evidence: SGX and TDX quotes, CC event logs and sample evidence."""

__version__ = "0.1.0"

__all__ = [
    "base",
    "eventlog",
    "kernel_params",
    "registry",
    "sample",
    "sgx_claims",
    "sgx_quote",
    "tdx_claims",
    "tdx_quote",
]