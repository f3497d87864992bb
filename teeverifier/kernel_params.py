"""Kernel command-line data carried in TD-Shim platform config events."""

from __future__ import annotations

import logging
import re
import struct
from dataclasses import dataclass

from .base import VerifierError

logger = logging.getLogger(__name__)

ERR_INVALID_HEADER = "invalid header"
ERR_NOT_ENOUGH_DATA = "not enough data after header"

_DESCRIPTOR_SIZE = 16
_INFO_LENGTH = struct.Struct("<I")
_HEADER_SIZE = _DESCRIPTOR_SIZE + _INFO_LENGTH.size

_SEPARATORS = re.compile("[ \n\r\0]")


@dataclass(frozen=True)
class TdShimPlatformConfigInfo:
    """A TD_SHIM_PLATFORM_CONFIG_INFO structure holding kernel parameters."""

    descriptor: bytes
    info_length: int
    data: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "TdShimPlatformConfigInfo":
        """Decode the structure; bytes after the declared data are ignored."""
        data = bytes(data)
        if len(data) < _HEADER_SIZE:
            raise VerifierError(ERR_INVALID_HEADER)
        descriptor = data[:_DESCRIPTOR_SIZE]
        (info_length,) = _INFO_LENGTH.unpack_from(data, _DESCRIPTOR_SIZE)
        total_size = _HEADER_SIZE + info_length
        if len(data) < total_size:
            raise VerifierError(ERR_NOT_ENOUGH_DATA)
        return cls(
            descriptor=descriptor,
            info_length=info_length,
            data=data[_HEADER_SIZE:total_size],
        )


def parse_kernel_parameters(kernel_parameters: bytes) -> dict[str, str | None]:
    """Split a kernel command line into a map of parameter names to values.

    Parameters are separated by spaces, newlines, carriage returns or NUL
    bytes. A parameter without ``=`` maps to ``None``; otherwise the value is
    everything after the first ``=``. Keys come out in sorted order and a
    repeated key keeps its last value.
    """
    try:
        text = bytes(kernel_parameters).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise VerifierError("kernel parameters are not valid UTF-8") from exc
    logger.debug("kernel parameters: %s", text)

    parameters: dict[str, str | None] = {}
    for item in _SEPARATORS.split(text):
        if not item:
            continue
        key, sep, value = item.partition("=")
        parameters[key] = value if sep else None
    return dict(sorted(parameters.items()))