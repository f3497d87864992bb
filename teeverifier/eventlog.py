"""Confidential-computing event log queries and RTMR replay."""

from __future__ import annotations

import enum
import hashlib
import struct
from dataclasses import dataclass, field

from .base import VerifierError

_RTMR_SIZE = 48
_HASH_BY_SIZE = {
    32: hashlib.sha256,
    48: hashlib.sha384,
    64: hashlib.sha512,
}


class MeasuredEntity(enum.Enum):
    """Entities whose measurement events can be looked up in the log."""

    TD_SHIM = "td_hob\0"
    TD_SHIM_KERNEL = "td_payload\0"
    TD_SHIM_KERNEL_PARAMS = "td_payload_info\0"
    TDVF_KERNEL = "k\0e\0r\0n\0e\0l\0"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Rtmr:
    """The four runtime measurement registers of a TD."""

    rtmr0: bytes
    rtmr1: bytes
    rtmr2: bytes
    rtmr3: bytes


@dataclass(frozen=True)
class EventDigest:
    """One digest of an event, tagged with its TCG algorithm id."""

    algorithm: int
    digest: bytes


@dataclass(frozen=True)
class EventEntry:
    """One event of the log."""

    target_measurement_registry: int
    event_type: int
    digests: list[EventDigest]
    event_desc: bytes


def query_key_prefix(entity: MeasuredEntity) -> bytes:
    """Return the event description prefix that identifies ``entity``."""
    name = entity.value.encode()
    if entity is MeasuredEntity.TD_SHIM_KERNEL:
        # UEFI_PLATFORM_FIRMWARE_BLOB2: a one-byte length, then the description.
        return bytes([len(name)]) + name
    return name


@dataclass
class CcEventLog:
    """A parsed CC event log."""

    events: list[EventEntry] = field(default_factory=list)

    def _replay_measurement_registry(self) -> dict[int, bytes]:
        registers: dict[int, bytes] = {}
        for entry in self.events:
            if not entry.digests:
                continue
            digest = entry.digests[0].digest
            algo = _HASH_BY_SIZE.get(len(digest))
            if algo is None:
                raise VerifierError(f"unsupported digest size {len(digest)} in event log")
            index = entry.target_measurement_registry
            current = registers.get(index, bytes(len(digest)))
            registers[index] = algo(current + digest).digest()
        return registers

    def rebuild_rtmr(self) -> Rtmr:
        """Replay the log into RTMR values; unextended registers stay zero."""
        registers = self._replay_measurement_registry()
        values = []
        for index in range(1, 5):
            value = registers.get(index, bytes(_RTMR_SIZE))
            if len(value) < _RTMR_SIZE:
                raise VerifierError(
                    f"measurement register {index} holds {len(value)} bytes, "
                    f"expected {_RTMR_SIZE}"
                )
            values.append(value[:_RTMR_SIZE])
        return Rtmr(*values)

    def integrity_check(self, rtmr_from_quote: Rtmr) -> None:
        """Raise unless the replayed registers equal those from the quote."""
        if self.rebuild_rtmr() != rtmr_from_quote:
            raise VerifierError(
                "RTMR values from TD quote is not equal with the values from EventLog\n"
            )

    def _find(self, entity: MeasuredEntity) -> EventEntry | None:
        prefix = query_key_prefix(entity)
        return next(
            (entry for entry in self.events if entry.event_desc.startswith(prefix)),
            None,
        )

    def query_digest(self, entity: MeasuredEntity) -> str | None:
        """Hex digest of the first event describing ``entity``, if any."""
        entry = self._find(entity)
        if entry is None:
            return None
        if not entry.digests:
            raise VerifierError(f"event for {entity.name} carries no digest")
        return entry.digests[0].digest.hex()

    def query_event_data(self, entity: MeasuredEntity) -> bytes | None:
        """Description data of the first event describing ``entity``, if any."""
        entry = self._find(entity)
        return None if entry is None else entry.event_desc


_U64 = struct.Struct("<Q")


@dataclass(frozen=True)
class ParsedUefiPlatformFirmwareBlob2:
    """A UEFI_PLATFORM_FIRMWARE_BLOB2 event structure."""

    desc_len: int
    desc: bytes
    blob_base: int
    blob_length: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "ParsedUefiPlatformFirmwareBlob2":
        """Decode the structure from raw event data."""
        data = bytes(data)
        if not data:
            raise VerifierError("firmware blob data is empty")
        desc_len = data[0]
        end = 1 + desc_len + 2 * _U64.size
        if len(data) < end:
            raise VerifierError(
                f"firmware blob data too short: need {end} bytes, got {len(data)}"
            )
        desc = data[1 : 1 + desc_len]
        (blob_base,) = _U64.unpack_from(data, 1 + desc_len)
        (blob_length,) = _U64.unpack_from(data, 1 + desc_len + _U64.size)
        return cls(desc_len=desc_len, desc=desc, blob_base=blob_base, blob_length=blob_length)