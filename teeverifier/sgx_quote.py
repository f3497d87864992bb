"""Layout and parsing of SGX ECDSA (version 3) quotes."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .base import VerifierError

QUOTE_SIZE = 436

_HEADER = struct.Struct("<2s2s4s2s2s16s20s")
_BODY = struct.Struct("<16s4s12s16s8s8s32s32s32s32s64s2s2s2s42s16s64s")
_SIG_LEN = struct.Struct("<I")


def _hex_list(data: bytes) -> str:
    return "[" + ", ".join(f"{b:X}" for b in data) + "]"


@dataclass(frozen=True)
class SgxAttributes:
    """Enclave attribute flags and XFRM."""

    flags: bytes
    xfrm: bytes


@dataclass(frozen=True)
class SgxReportBody:
    """The enclave report carried inside a quote."""

    cpu_svn: bytes
    misc_select: bytes
    reserved1: bytes
    isv_ext_prod_id: bytes
    attributes: SgxAttributes
    mr_enclave: bytes
    reserved2: bytes
    mr_signer: bytes
    reserved3: bytes
    config_id: bytes
    isv_prod_id: bytes
    isv_svn: bytes
    config_svn: bytes
    reserved4: bytes
    isv_family_id: bytes
    report_data: bytes


@dataclass(frozen=True)
class SgxQuoteHeader:
    """The quote header."""

    version: bytes
    att_key_type: bytes
    att_key_data_0: bytes
    qe_svn: bytes
    pce_svn: bytes
    vendor_id: bytes
    user_data: bytes


@dataclass(frozen=True)
class SgxQuote:
    """An SGX quote without its variable-length signature data."""

    header: SgxQuoteHeader
    report_body: SgxReportBody
    signature_data_len: int
    signature_data: bytes = b""

    def __str__(self) -> str:
        h = self.header
        b = self.report_body
        header = (
            "\nQUOTE HEADER\n\n"
            f"\tversion:\t{_hex_list(h.version)}\n"
            f"\tatt_key_type:\t{_hex_list(h.att_key_type)}\n"
            f"\tatt_key_data_0:\t{_hex_list(h.att_key_data_0)}\n"
            f"\tqe_svn:\t{_hex_list(h.qe_svn)}\n"
            f"\tpce_svn:\t{_hex_list(h.pce_svn)}\n"
            f"\tvendor_id:\t{_hex_list(h.vendor_id)}\n"
            f"\tuser_data:\t{_hex_list(h.user_data)}\n"
        )
        body = (
            "\nREPORT BODY\n\n"
            f"\tcpu_svn:\t{_hex_list(b.cpu_svn)}\n"
            f"\tmisc_select:\t{_hex_list(b.misc_select)}\n"
            f"\treserved1:\t{_hex_list(b.reserved1)}\n"
            f"\tisv_ext_prod_id:\t{_hex_list(b.isv_ext_prod_id)}\n"
            "\tattributes:\n"
            f"\t\tflags:\t{_hex_list(b.attributes.flags)}\n"
            f"\t\txfrm:\t{_hex_list(b.attributes.xfrm)}\n"
            f"\tmr_enclave\t{_hex_list(b.mr_enclave)}\n"
            f"\treserved2:\t{_hex_list(b.reserved2)}\n"
            f"\tmr_signer:\t{_hex_list(b.mr_signer)}\n"
            f"\treserved3:\t{_hex_list(b.reserved3)}\n"
            f"\tconfig_id:\t{_hex_list(b.config_id)}\n"
            f"\tisv_prod_id:\t{_hex_list(b.isv_prod_id)}\n"
            f"\tisv_svn:\t{_hex_list(b.isv_svn)}\n"
            f"\tconfig_svn:\t{_hex_list(b.config_svn)}\n"
            f"\treserved4:\t{_hex_list(b.reserved4)}\n"
            f"\tisv_family_id:\t{_hex_list(b.isv_family_id)}\n"
            f"\treport_data:\t{_hex_list(b.report_data)}\n"
        )
        signature = (
            "\nSIGNATURE\n            \n"
            f"\tsignature_data_len:\t{self.signature_data_len:X}\n"
            f"\tsignature_data:\t{_hex_list(self.signature_data)}\n"
        )
        return header + body + signature


def parse_sgx_quote(quote: bytes) -> SgxQuote:
    """Parse the fixed-size leading part of an SGX quote."""
    quote = bytes(quote)
    if len(quote) < QUOTE_SIZE:
        raise VerifierError(
            f"Parse SGX quote failed: need {QUOTE_SIZE} bytes, got {len(quote)}"
        )
    header = SgxQuoteHeader(*_HEADER.unpack_from(quote, 0))
    (
        cpu_svn,
        misc_select,
        reserved1,
        isv_ext_prod_id,
        flags,
        xfrm,
        mr_enclave,
        reserved2,
        mr_signer,
        reserved3,
        config_id,
        isv_prod_id,
        isv_svn,
        config_svn,
        reserved4,
        isv_family_id,
        report_data,
    ) = _BODY.unpack_from(quote, _HEADER.size)
    body = SgxReportBody(
        cpu_svn=cpu_svn,
        misc_select=misc_select,
        reserved1=reserved1,
        isv_ext_prod_id=isv_ext_prod_id,
        attributes=SgxAttributes(flags=flags, xfrm=xfrm),
        mr_enclave=mr_enclave,
        reserved2=reserved2,
        mr_signer=mr_signer,
        reserved3=reserved3,
        config_id=config_id,
        isv_prod_id=isv_prod_id,
        isv_svn=isv_svn,
        config_svn=config_svn,
        reserved4=reserved4,
        isv_family_id=isv_family_id,
        report_data=report_data,
    )
    (signature_data_len,) = _SIG_LEN.unpack_from(quote, _HEADER.size + _BODY.size)
    return SgxQuote(header=header, report_body=body, signature_data_len=signature_data_len)