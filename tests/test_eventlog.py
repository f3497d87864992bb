import pytest

from teeverifier.base import VerifierError
from teeverifier.eventlog import (
    CcEventLog,
    EventDigest,
    EventEntry,
    MeasuredEntity,
    ParsedUefiPlatformFirmwareBlob2,
    Rtmr,
    query_key_prefix,
)

SHA384_ALG = 0x0C


def _event(register, digest, desc=b"", event_type=0x80000001):
    return EventEntry(
        target_measurement_registry=register,
        event_type=event_type,
        digests=[EventDigest(SHA384_ALG, digest)],
        event_desc=desc,
    )


def test_key_prefix_td_shim_kernel_has_length_byte():
    assert query_key_prefix(MeasuredEntity.TD_SHIM_KERNEL) == b"\x0btd_payload\x00"


def test_key_prefix_plain_entities():
    assert query_key_prefix(MeasuredEntity.TDVF_KERNEL) == b"k\0e\0r\0n\0e\0l\0"
    assert query_key_prefix(MeasuredEntity.TD_SHIM) == b"td_hob\0"
    assert query_key_prefix(MeasuredEntity.TD_SHIM_KERNEL_PARAMS) == b"td_payload_info\0"


def test_empty_log_rebuilds_zero_registers():
    rtmr = CcEventLog().rebuild_rtmr()
    zero = bytes(48)
    assert rtmr == Rtmr(zero, zero, zero, zero)


def test_rebuild_touches_only_target_register():
    log = CcEventLog([_event(2, b"\x11" * 48)])
    rtmr = log.rebuild_rtmr()
    assert rtmr.rtmr0 == bytes(48)
    assert rtmr.rtmr1 != bytes(48)
    assert len(rtmr.rtmr1) == 48
    assert rtmr.rtmr2 == bytes(48)
    assert rtmr.rtmr3 == bytes(48)


def test_rebuild_depends_on_event_order():
    a = _event(1, b"\x01" * 48)
    b = _event(1, b"\x02" * 48)
    first = CcEventLog([a, b]).rebuild_rtmr()
    second = CcEventLog([b, a]).rebuild_rtmr()
    assert first.rtmr0 != second.rtmr0


def test_rebuild_rejects_unknown_digest_size():
    log = CcEventLog([_event(1, b"\x01" * 5)])
    with pytest.raises(VerifierError):
        log.rebuild_rtmr()


def test_integrity_check_accepts_replayed_values():
    log = CcEventLog([_event(1, b"\x03" * 48), _event(3, b"\x04" * 48)])
    rebuilt = log.rebuild_rtmr()
    assert log.integrity_check(rebuilt) is None
    assert rebuilt.rtmr0 != bytes(48)


def test_integrity_check_rejects_mismatch():
    log = CcEventLog([_event(1, b"\x03" * 48)])
    rebuilt = log.rebuild_rtmr()
    wrong = Rtmr(bytes(48), rebuilt.rtmr1, rebuilt.rtmr2, rebuilt.rtmr3)
    with pytest.raises(VerifierError, match="RTMR values from TD quote"):
        log.integrity_check(wrong)


def test_query_digest_finds_first_matching_event():
    prefix = query_key_prefix(MeasuredEntity.TD_SHIM_KERNEL)
    first = b"\xaa" * 48
    second = b"\xbb" * 48
    log = CcEventLog(
        [
            _event(1, b"\x00" * 48, b"other"),
            _event(2, first, prefix + b"rest"),
            _event(2, second, prefix),
        ]
    )
    assert log.query_digest(MeasuredEntity.TD_SHIM_KERNEL) == first.hex()


def test_query_digest_missing_entity_is_none():
    log = CcEventLog([_event(1, b"\x00" * 48, b"td")])
    assert log.query_digest(MeasuredEntity.TDVF_KERNEL) is None
    assert log.query_event_data(MeasuredEntity.TDVF_KERNEL) is None


def test_query_event_data_returns_description():
    desc = b"td_payload_info\0" + b"payload"
    log = CcEventLog([_event(2, b"\x00" * 48, desc)])
    assert log.query_event_data(MeasuredEntity.TD_SHIM_KERNEL_PARAMS) == desc


def test_firmware_blob_round_trip():
    data = (
        bytes([3])
        + b"abc"
        + (4096).to_bytes(8, "little")
        + (32).to_bytes(8, "little")
    )
    blob = ParsedUefiPlatformFirmwareBlob2.from_bytes(data)
    assert blob.desc_len == 3
    assert blob.desc == b"abc"
    assert blob.blob_base == 4096
    assert blob.blob_length == 32


@pytest.mark.parametrize("data", [b"", bytes([3]) + b"abc" + bytes(15)])
def test_firmware_blob_too_short(data):
    with pytest.raises(VerifierError):
        ParsedUefiPlatformFirmwareBlob2.from_bytes(data)