"""Common verifier interface, TEE kinds and shared helpers."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

TeeEvidenceParsedClaim = Any
"""JSON-compatible value describing the claims parsed out of TEE evidence."""


class VerifierError(Exception):
    """Raised when evidence cannot be parsed or fails verification."""


class Tee(enum.Enum):
    """Kinds of trusted execution environment a verifier can handle."""

    SEV = "sev"
    AZ_SNP_VTPM = "azsnpvtpm"
    AZ_TDX_VTPM = "aztdxvtpm"
    TDX = "tdx"
    SNP = "snp"
    SAMPLE = "sample"
    SGX = "sgx"
    CSV = "csv"
    CCA = "cca"
    SE = "se"


class Verifier(ABC):
    """Checks TEE evidence and extracts its claims.

    ``expected_report_data`` and ``expected_init_data_hash`` are byte
    strings, or ``None`` when the caller does not provide them. When given,
    the verifier checks their binding against the values carried inside the
    evidence.
    """

    @abstractmethod
    def evaluate(
        self,
        evidence: bytes,
        expected_report_data: bytes | None,
        expected_init_data_hash: bytes | None,
    ) -> TeeEvidenceParsedClaim:
        """Verify ``evidence`` and return the parsed claims."""

    def generate_supplemental_challenge(self, tee_parameters: str) -> str:
        """Return a verifier-side challenge for the attester; empty by default."""
        return ""


def regularize_data(data: bytes, length: int, data_name: str, arch: str) -> bytes:
    """Pad ``data`` with NUL bytes or truncate it to exactly ``length`` bytes."""
    data = bytes(data)
    if len(data) < length:
        logger.debug(
            "The input %s of %s is shorter than %d bytes, will be padded with '\\0'.",
            data_name,
            arch,
            length,
        )
        return data.ljust(length, b"\0")
    if len(data) > length:
        logger.debug(
            "The input %s of %s is longer than %d bytes, will be truncated to %d bytes.",
            data_name,
            arch,
            length,
            length,
        )
        return data[:length]
    return data