"""Verifier for the sample TEE, which carries its claims as plain JSON."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any

from .base import TeeEvidenceParsedClaim, Verifier, VerifierError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleTeeEvidence:
    """Evidence produced by the sample attester."""

    svn: str
    report_data: str = ""
    init_data: str = ""

    @classmethod
    def from_json(cls, evidence: bytes | str) -> "SampleTeeEvidence":
        """Parse sample evidence from its JSON encoding."""
        try:
            doc: Any = json.loads(evidence)
        except (ValueError, UnicodeDecodeError) as exc:
            raise VerifierError("Deserialize Quote failed.") from exc
        if not isinstance(doc, dict):
            raise VerifierError("Deserialize Quote failed.")
        if "svn" not in doc:
            raise VerifierError("Deserialize Quote failed.") from KeyError("svn")
        fields = {
            "svn": doc["svn"],
            "report_data": doc.get("report_data", ""),
            "init_data": doc.get("init_data", ""),
        }
        for name, value in fields.items():
            if not isinstance(value, str):
                raise VerifierError("Deserialize Quote failed.") from TypeError(
                    f"field {name} must be a string"
                )
        return cls(**fields)


def _decode_b64(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise VerifierError(f"base64 decode {what} for sample evidence") from exc


def verify_tee_evidence(
    expected_report_data: bytes | None,
    expected_init_data_hash: bytes | None,
    evidence: SampleTeeEvidence,
) -> None:
    """Check the report data and init data hash bindings of sample evidence."""
    if expected_report_data is not None:
        logger.debug("Check the binding of REPORT_DATA.")
        ev_report_data = _decode_b64(evidence.report_data, "report data")
        if bytes(expected_report_data) != ev_report_data:
            raise VerifierError("REPORT_DATA is different from that in Sample Quote")

    if expected_init_data_hash is not None:
        logger.debug("Check the binding of init_data_digest.")
        ev_init_data_hash = _decode_b64(evidence.init_data, "init data hash")
        if bytes(expected_init_data_hash) != ev_init_data_hash:
            raise VerifierError("INIT DATA HASH is different from that in Sample Quote")


def parse_tee_evidence(evidence: SampleTeeEvidence) -> TeeEvidenceParsedClaim:
    """Dump the claims carried by sample evidence."""
    return {
        "svn": evidence.svn,
        "report_data": evidence.report_data,
        "init_data": evidence.init_data,
    }


class SampleVerifier(Verifier):
    """Verifier for the sample TEE; there is no hardware signature to check."""

    def evaluate(
        self,
        evidence: bytes,
        expected_report_data: bytes | None,
        expected_init_data_hash: bytes | None,
    ) -> TeeEvidenceParsedClaim:
        tee_evidence = SampleTeeEvidence.from_json(evidence)
        try:
            verify_tee_evidence(expected_report_data, expected_init_data_hash, tee_evidence)
        except VerifierError as exc:
            raise VerifierError("Evidence's identity verification error.") from exc
        logger.debug("TEE-Evidence<sample>: %r", tee_evidence)
        return parse_tee_evidence(tee_evidence)