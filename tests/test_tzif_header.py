import io
import logging
import struct

import pytest

from tzif_decoder.errors import (
    ErrorKind,
    FormatError,
    MagicMismatchError,
    TruncatedStreamError,
)
from tzif_decoder.reader import BinaryReader
from tzif_decoder.tzif_header import FormatVersion, TimeZoneInfoHeader


def _header_bytes(magic=b"TZif", version=b"\x00", counts=(1, 2, 3, 4, 5, 6)) -> bytes:
    return struct.pack(">4sc15x6i", magic, version, *counts)


def test_header_is_44_bytes():
    assert struct.calcsize(TimeZoneInfoHeader.FORMAT) == 44


def test_read_header_counts_in_file_order():
    reader = BinaryReader(io.BytesIO(_header_bytes()))
    header = TimeZoneInfoHeader.read(reader)

    assert header.is_utc_flag_count == 1
    assert header.wall_standard_flag_count == 2
    assert header.leap_second_transitions_count == 3
    assert header.transitions_count == 4
    assert header.local_time_type_count == 5
    assert header.timezone_abbrev_byte_count == 6
    assert header.version is FormatVersion.LEGACY
    assert reader.position == 44


def test_read_header_ignores_reserved_bytes():
    data = bytearray(_header_bytes(version=b"2"))
    data[5:20] = b"\xaa" * 15
    header = TimeZoneInfoHeader.read(BinaryReader(io.BytesIO(bytes(data))))

    assert header.version is FormatVersion.V2
    assert header.transitions_count == 4


@pytest.mark.parametrize(
    "version_byte, expected, extended",
    [
        (b"\x00", FormatVersion.LEGACY, False),
        (b"2", FormatVersion.V2, True),
        (b"3", FormatVersion.V3, True),
        (b"4", FormatVersion.LEGACY, False),
        (b"A", FormatVersion.LEGACY, False),
    ],
)
def test_read_header_version(version_byte, expected, extended):
    header = TimeZoneInfoHeader.read(
        BinaryReader(io.BytesIO(_header_bytes(version=version_byte)))
    )

    assert header.version is expected
    assert header.version.has_extended_block is extended
    assert header.version_byte == version_byte


def test_unrecognized_version_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="tzif_decoder.tzif_header"):
        TimeZoneInfoHeader.read(BinaryReader(io.BytesIO(_header_bytes(version=b"9"))))

    assert "Unrecognized TZif version" in caplog.text


@pytest.mark.parametrize("magic", [b"TZiF", b"\x00\x00\x00\x00", b"FiZT"])
def test_read_header_rejects_bad_magic(magic):
    with pytest.raises(MagicMismatchError) as exc_info:
        TimeZoneInfoHeader.read(BinaryReader(io.BytesIO(_header_bytes(magic=magic))))

    assert exc_info.value.kind is ErrorKind.MAGIC_MISMATCH
    assert exc_info.value.magic == magic


def test_read_header_rejects_negative_count():
    data = _header_bytes(counts=(0, 0, 0, -1, 1, 0))
    with pytest.raises(FormatError) as exc_info:
        TimeZoneInfoHeader.read(BinaryReader(io.BytesIO(data)))

    assert exc_info.value.kind is ErrorKind.MALFORMED_HEADER
    assert "transitions_count" in str(exc_info.value)


def test_read_header_truncated():
    with pytest.raises(TruncatedStreamError):
        TimeZoneInfoHeader.read(BinaryReader(io.BytesIO(_header_bytes()[:30])))


def test_short_stream_with_wrong_signature_is_magic_mismatch():
    with pytest.raises(MagicMismatchError):
        TimeZoneInfoHeader.read(BinaryReader(io.BytesIO(b"GIF89a")))
