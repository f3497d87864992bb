"""Layout and parsing of TDX quotes, versions 4 and 5."""

from __future__ import annotations

import enum
import struct
import sys
from dataclasses import dataclass
from typing import Union

from .base import VerifierError

QUOTE_HEADER_SIZE = 48

_HEADER = struct.Struct("<2s2s4s4s16s20s")
_BODY2 = struct.Struct("<16s48s48s8s8s8s48s48s48s48s48s48s48s48s64s")
_BODY2_V15 = struct.Struct("<16s48s48s8s8s8s48s48s48s48s48s48s48s48s64s16s48s")
_V5_TYPE_SIZE = 2
_V5_SIZE_SIZE = 4
_V5_BODY_OFFSET = QUOTE_HEADER_SIZE + _V5_TYPE_SIZE + _V5_SIZE_SIZE

_INDENT = "\n            "


def _render(title: str, items: list[tuple[str, bytes]]) -> str:
    """Render labelled byte fields as quoted hex strings, one block each."""
    return title + ":" + "".join(
        f'{_INDENT}\n\t{label}:\n\t"{value.hex()}"' for label, value in items
    )


@dataclass(frozen=True)
class QuoteHeader:
    """The quote header, shared by every quote version."""

    version: bytes
    att_key_type: bytes
    tee_type: bytes
    reserved: bytes
    vendor_id: bytes
    user_data: bytes

    def __str__(self) -> str:
        return (
            _render(
                "Quote Header",
                [
                    ("Version", self.version),
                    ("Attestation Signature Key Type", self.att_key_type),
                    ("TEE Type", self.tee_type),
                    ("Reserved", self.reserved),
                    ("Vendor ID", self.vendor_id),
                    ("User Data", self.user_data),
                ],
            )
            + "\n"
        )


@dataclass(frozen=True)
class ReportBody2:
    """TD report body (TDX 1.0)."""

    tcb_svn: bytes
    mr_seam: bytes
    mrsigner_seam: bytes
    seam_attributes: bytes
    td_attributes: bytes
    xfam: bytes
    mr_td: bytes
    mr_config_id: bytes
    mr_owner: bytes
    mr_owner_config: bytes
    rtmr_0: bytes
    rtmr_1: bytes
    rtmr_2: bytes
    rtmr_3: bytes
    report_data: bytes

    def _items(self) -> list[tuple[str, bytes]]:
        return [
            ("TCB SVN", self.tcb_svn),
            ("MRSEAM", self.mr_seam),
            ("MRSIGNER_SEAM", self.mrsigner_seam),
            ("SEAM Attributes", self.seam_attributes),
            ("TD Attributes", self.td_attributes),
            ("TD XFAM", self.xfam),
            ("MRTD", self.mr_td),
            ("MRCONFIG ID", self.mr_config_id),
            ("MROWNER", self.mr_owner),
            ("MROWNER_CONFIG", self.mr_owner_config),
            ("RTMR[0]", self.rtmr_0),
            ("RTMR[1]", self.rtmr_1),
            ("RTMR[2]", self.rtmr_2),
            ("RTMR[3]", self.rtmr_3),
            ("Report Data", self.report_data),
        ]

    def __str__(self) -> str:
        return _render("Report Body", self._items())


@dataclass(frozen=True)
class ReportBody2v15(ReportBody2):
    """TD report body (TDX 1.5), carried by version 5 quotes."""

    tee_tcb_svn2: bytes
    mr_servicetd: bytes

    def _items(self) -> list[tuple[str, bytes]]:
        return super()._items() + [
            ("TEE TCB SVN2", self.tee_tcb_svn2),
            ("MR SERVICETD", self.mr_servicetd),
        ]


QuoteV5Body = Union[ReportBody2, ReportBody2v15]


class QuoteV5Type(enum.Enum):
    """Body type of a version 5 quote."""

    TDX10 = 2
    TDX15 = 3

    @classmethod
    def from_bytes(cls, data: bytes) -> "QuoteV5Type":
        """Decode the little-endian 16-bit type field."""
        if len(data) < 2:
            raise VerifierError("parse QuoteV5 Type failed. Bytes length < 2 bytes")
        raw = int.from_bytes(bytes(data[:2]), "little")
        try:
            return cls(raw)
        except ValueError:
            raise VerifierError(f"parse QuoteV5 Type failed. {raw} not defined.") from None

    def as_bytes(self) -> bytes:
        """Return the type as two bytes in native byte order."""
        return self.value.to_bytes(2, sys.byteorder)

    def __str__(self) -> str:
        label = "TDX 1.0" if self is QuoteV5Type.TDX10 else "TDX 1.5"
        return f"Quote v5 Type: {label}\n"


@dataclass(frozen=True)
class Quote:
    """A TD quote payload without its trailing signature data.

    Version 4 quotes have no ``v5_type`` or ``size``; version 5 quotes carry both.
    """

    header: QuoteHeader
    body: QuoteV5Body
    v5_type: QuoteV5Type | None = None
    size: bytes | None = None

    @property
    def version(self) -> int:
        return 4 if self.v5_type is None else 5

    def report_data(self) -> bytes:
        return self.body.report_data

    def mr_config_id(self) -> bytes:
        return self.body.mr_config_id

    def rtmr_0(self) -> bytes:
        return self.body.rtmr_0

    def rtmr_1(self) -> bytes:
        return self.body.rtmr_1

    def rtmr_2(self) -> bytes:
        return self.body.rtmr_2

    def rtmr_3(self) -> bytes:
        return self.body.rtmr_3

    def __str__(self) -> str:
        if self.v5_type is None:
            return f"TD Quote (V4):\n{self.header}\n{self.body}\n"
        return (
            f"TD Quote (V5):\n{self.header}\n{self.v5_type}\n"
            f"{(self.size or b'').hex()}\n{self.body}\n"
        )


def _parse_body(layout: struct.Struct, cls: type, data: bytes, offset: int, what: str):
    if len(data) < offset + layout.size:
        raise VerifierError(
            f"Parse TD quote {what} body failed: need {offset + layout.size} bytes, "
            f"got {len(data)}"
        )
    return cls(*layout.unpack_from(data, offset))


def parse_tdx_quote(quote_bin: bytes) -> Quote:
    """Parse the fixed-size leading part of a version 4 or 5 TD quote."""
    quote_bin = bytes(quote_bin)
    if len(quote_bin) < QUOTE_HEADER_SIZE:
        raise VerifierError(
            f"Parse TD quote header failed: need {QUOTE_HEADER_SIZE} bytes, "
            f"got {len(quote_bin)}"
        )
    header = QuoteHeader(*_HEADER.unpack_from(quote_bin, 0))

    if header.version == b"\x04\x00":
        body = _parse_body(_BODY2, ReportBody2, quote_bin, QUOTE_HEADER_SIZE, "v4")
        return Quote(header=header, body=body)

    if header.version == b"\x05\x00":
        v5_type = QuoteV5Type.from_bytes(
            quote_bin[QUOTE_HEADER_SIZE : QUOTE_HEADER_SIZE + _V5_TYPE_SIZE]
        )
        size = quote_bin[QUOTE_HEADER_SIZE + _V5_TYPE_SIZE : _V5_BODY_OFFSET]
        if len(size) != _V5_SIZE_SIZE:
            raise VerifierError("Parse TD quote v5 size failed: not enough data")
        if v5_type is QuoteV5Type.TDX10:
            body = _parse_body(_BODY2, ReportBody2, quote_bin, _V5_BODY_OFFSET, "v5 TDX1.0")
        else:
            body = _parse_body(
                _BODY2_V15, ReportBody2v15, quote_bin, _V5_BODY_OFFSET, "v5 TDX1.5"
            )
        return Quote(header=header, body=body, v5_type=v5_type, size=size)

    raise VerifierError("Quote version not defined.")