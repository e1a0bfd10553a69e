import logging
from dataclasses import dataclass
from enum import Enum

from .errors import FormatError, MagicMismatchError
from .reader import BinaryReader

_LOGGER = logging.getLogger(__name__)

_MAGIC = b"TZif"


class FormatVersion(Enum):
    """
    Represents the version byte of a TZif header.
    """

    LEGACY = 1
    V2 = 2
    V3 = 3

    @property
    def has_extended_block(self) -> bool:
        return self is not FormatVersion.LEGACY

    @classmethod
    def from_byte(cls, version_byte: bytes) -> "FormatVersion":
        if version_byte == b"2":
            return cls.V2
        if version_byte == b"3":
            return cls.V3
        if version_byte != b"\x00":
            _LOGGER.warning(
                "Unrecognized TZif version byte %r, decoding as version 1",
                version_byte,
            )
        return cls.LEGACY


@dataclass(frozen=True)
class TimeZoneInfoHeader:
    version: FormatVersion
    is_utc_flag_count: int
    wall_standard_flag_count: int
    leap_second_transitions_count: int
    transitions_count: int
    local_time_type_count: int
    timezone_abbrev_byte_count: int
    version_byte: bytes = b"\x00"

    # Big endian: magic, version, 15 reserved bytes, six signed counts
    FORMAT = ">4s1c15x6i"
    # Everything after the magic
    _FIELDS_FORMAT = ">1c15x6i"

    @classmethod
    def read(cls, reader: BinaryReader) -> "TimeZoneInfoHeader":
        magic = reader.read_bytes(len(_MAGIC))
        if magic != _MAGIC:
            raise MagicMismatchError(magic)

        (
            version_byte,
            is_utc_flag_count,
            wall_standard_flag_count,
            leap_second_count,
            transitions_count,
            local_time_type_count,
            timezone_abbrev_byte_count,
        ) = reader.read_struct(cls._FIELDS_FORMAT)

        header = cls(
            FormatVersion.from_byte(version_byte),
            is_utc_flag_count,
            wall_standard_flag_count,
            leap_second_count,
            transitions_count,
            local_time_type_count,
            timezone_abbrev_byte_count,
            version_byte,
        )
        for name, count in header.counts().items():
            if count < 0:
                raise FormatError(f"Invalid TZif header: {name} is negative ({count}).")

        _LOGGER.debug("Read TZif header %s", header)
        return header

    def counts(self) -> dict[str, int]:
        return {
            "is_utc_flag_count": self.is_utc_flag_count,
            "wall_standard_flag_count": self.wall_standard_flag_count,
            "leap_second_transitions_count": self.leap_second_transitions_count,
            "transitions_count": self.transitions_count,
            "local_time_type_count": self.local_time_type_count,
            "timezone_abbrev_byte_count": self.timezone_abbrev_byte_count,
        }
