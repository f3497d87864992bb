"""Selection of a verifier for a given TEE kind."""

from __future__ import annotations

from .base import Tee, Verifier, VerifierError
from .sample import SampleVerifier

_UNAVAILABLE = {
    Tee.AZ_SNP_VTPM: "az-snp-vtpm-verifier",
    Tee.AZ_TDX_VTPM: "az-tdx-vtpm-verifier",
    Tee.TDX: "tdx-verifier",
    Tee.SNP: "snp-verifier",
    Tee.SGX: "sgx-verifier",
    Tee.CSV: "csv-verifier",
    Tee.CCA: "cca-verifier",
    Tee.SE: "se-verifier",
}


def to_verifier(tee: Tee | str) -> Verifier:
    """Return a verifier instance for ``tee``."""
    tee = Tee(tee)
    if tee is Tee.SAMPLE:
        return SampleVerifier()
    if tee is Tee.SEV:
        raise VerifierError("verifier for `sev` is not supported")
    raise VerifierError(f"feature `{_UNAVAILABLE[tee]}` is not enabled for verifier")