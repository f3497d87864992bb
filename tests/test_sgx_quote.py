import pytest

from teeverifier.base import VerifierError
from teeverifier.sgx_quote import QUOTE_SIZE, parse_sgx_quote

HEADER_SIZE = 48


@pytest.fixture
def quote_bin():
    data = bytearray(i % 251 for i in range(QUOTE_SIZE))
    data[0:2] = b"\x03\x00"
    data[2:4] = b"\x02\x00"
    return bytes(data) + b"signature-bytes"


def test_header_fields(quote_bin):
    quote = parse_sgx_quote(quote_bin)
    assert quote.header.version == quote_bin[0:2]
    assert quote.header.att_key_type == quote_bin[2:4]
    assert quote.header.vendor_id == quote_bin[12:28]
    assert quote.header.user_data == quote_bin[28:48]


def test_body_fields_follow_documented_offsets(quote_bin):
    body = parse_sgx_quote(quote_bin).report_body
    base = HEADER_SIZE
    assert body.cpu_svn == quote_bin[base : base + 16]
    assert body.attributes.flags == quote_bin[base + 48 : base + 56]
    assert body.attributes.xfrm == quote_bin[base + 56 : base + 64]
    assert body.mr_enclave == quote_bin[base + 64 : base + 96]
    assert body.mr_signer == quote_bin[base + 128 : base + 160]
    assert body.config_id == quote_bin[base + 192 : base + 256]
    assert body.isv_family_id == quote_bin[base + 304 : base + 320]
    assert body.report_data == quote_bin[base + 320 : base + 384]


def test_signature_length_and_trailing_data_ignored(quote_bin):
    quote = parse_sgx_quote(quote_bin)
    assert quote.signature_data_len == int.from_bytes(quote_bin[432:436], "little")
    assert quote.signature_data == b""
    assert parse_sgx_quote(quote_bin[:QUOTE_SIZE]) == quote


def test_too_short_quote_raises(quote_bin):
    with pytest.raises(VerifierError, match="Parse SGX quote failed"):
        parse_sgx_quote(quote_bin[: QUOTE_SIZE - 1])


def test_display_contains_sections(quote_bin):
    text = str(parse_sgx_quote(quote_bin))
    assert "QUOTE HEADER" in text
    assert "REPORT BODY" in text
    assert "SIGNATURE" in text
    assert "\tversion:\t[3, 0]\n" in text
    assert "\tsignature_data:\t[]\n" in text
    assert "\tatt_key_type:\t[2, 0]\n" in text