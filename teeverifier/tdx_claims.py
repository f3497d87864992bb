"""Flatten a TD quote and its CC event log into a JSON claims map."""

from __future__ import annotations

import json
import logging
from typing import Any

from .base import TeeEvidenceParsedClaim
from .eventlog import CcEventLog, MeasuredEntity
from .kernel_params import TdShimPlatformConfigInfo, parse_kernel_parameters
from .tdx_quote import Quote, ReportBody2, ReportBody2v15

logger = logging.getLogger(__name__)

_BODY_FIELDS = (
    "tcb_svn",
    "mr_seam",
    "mrsigner_seam",
    "seam_attributes",
    "td_attributes",
    "xfam",
    "mr_td",
    "mr_config_id",
    "mr_owner",
    "mr_owner_config",
    "rtmr_0",
    "rtmr_1",
    "rtmr_2",
    "rtmr_3",
    "report_data",
)

_BODY_V15_FIELDS = ("tee_tcb_svn2", "mr_servicetd")


def _header_claims(quote: Quote) -> dict[str, str]:
    header = quote.header
    version = b"\x04\x00" if quote.v5_type is None else b"\x05\x00"
    return {
        "version": version.hex(),
        "att_key_type": header.att_key_type.hex(),
        "tee_type": header.tee_type.hex(),
        "reserved": header.reserved.hex(),
        "vendor_id": header.vendor_id.hex(),
        "user_data": header.user_data.hex(),
    }


def _body_claims(body: ReportBody2) -> dict[str, str]:
    names = _BODY_FIELDS
    if isinstance(body, ReportBody2v15):
        names = names + _BODY_V15_FIELDS
    return {name: getattr(body, name).hex() for name in names}


def parse_ccel(ccel: CcEventLog) -> dict[str, Any]:
    """Extract the kernel digest and kernel parameters recorded in ``ccel``."""
    ccel_map: dict[str, Any] = {}

    kernel_digest = ccel.query_digest(MeasuredEntity.TD_SHIM_KERNEL)
    if kernel_digest is not None:
        ccel_map["kernel"] = kernel_digest
    else:
        logger.warning("No td-shim kernel hash in CCEL")

    kernel_digest = ccel.query_digest(MeasuredEntity.TDVF_KERNEL)
    if kernel_digest is not None:
        ccel_map["kernel"] = kernel_digest
    else:
        logger.warning("No tdvf kernel hash in CCEL")

    config_info = ccel.query_event_data(MeasuredEntity.TD_SHIM_KERNEL_PARAMS)
    if config_info is not None:
        info = TdShimPlatformConfigInfo.from_bytes(config_info)
        ccel_map["kernel_parameters"] = parse_kernel_parameters(info.data)
    else:
        logger.warning("No kernel parameters in CCEL")

    return ccel_map


def generate_parsed_claim(
    quote: Quote, cc_eventlog: CcEventLog | None = None
) -> TeeEvidenceParsedClaim:
    """Return the claims of ``quote`` and, if given, of ``cc_eventlog``."""
    quote_map: dict[str, Any] = {}
    if quote.v5_type is not None:
        quote_map["type"] = quote.v5_type.as_bytes().hex()
        quote_map["size"] = (quote.size or b"").hex()
    quote_map["header"] = _header_claims(quote)
    quote_map["body"] = _body_claims(quote.body)

    ccel_map = parse_ccel(cc_eventlog) if cc_eventlog is not None else {}

    claims: dict[str, Any] = {
        "quote": quote_map,
        "ccel": ccel_map,
        "report_data": quote.report_data().hex(),
        "init_data": quote.mr_config_id().hex(),
    }

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Parsed Evidence claims map: \n%s\n", json.dumps(claims, indent=2))
    return claims