"""Flatten the fields of an SGX quote into a JSON claims map."""

from __future__ import annotations

import logging
from typing import Any

from .base import TeeEvidenceParsedClaim
from .sgx_quote import SgxQuote

logger = logging.getLogger(__name__)


def generate_parsed_claims(quote: SgxQuote) -> TeeEvidenceParsedClaim:
    """Return the header and body of ``quote`` as hex-encoded claims."""
    header = quote.header
    body = quote.report_body

    quote_header = {
        "version": header.version.hex(),
        "att_key_type": header.att_key_type.hex(),
        "att_key_data_0": header.att_key_data_0.hex(),
        "qe_svn": header.qe_svn.hex(),
        "pce_svn": header.pce_svn.hex(),
        "vendor_id": header.vendor_id.hex(),
        "user_data": header.user_data.hex(),
    }

    quote_body = {
        "cpu_svn": body.cpu_svn.hex(),
        "misc_select": body.misc_select.hex(),
        "reserved1": body.reserved1.hex(),
        "isv_ext_prod_id": body.isv_ext_prod_id.hex(),
        "attributes.flags": body.attributes.flags.hex(),
        "attributes.xfrm": body.attributes.xfrm.hex(),
        "mr_enclave": body.mr_enclave.hex(),
        "reserved2": body.reserved2.hex(),
        "mr_signer": body.mr_signer.hex(),
        "reserved3": body.reserved3.hex(),
        "config_id": body.config_id.hex(),
        "isv_prod_id": body.isv_prod_id.hex(),
        "isv_svn": body.isv_svn.hex(),
        "config_svn": body.config_svn.hex(),
        "reserved4": body.reserved4.hex(),
        "isv_family_id": body.isv_family_id.hex(),
        "report_data": body.report_data.hex(),
    }

    claims: dict[str, Any] = {
        "header": quote_header,
        "body": quote_body,
        "report_data": body.report_data.hex(),
        "init_data": body.config_id.hex(),
    }

    logger.info("Parsed Evidence claims map: %r", claims)
    return claims