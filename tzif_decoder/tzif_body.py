import logging
from collections.abc import Sequence

from .errors import ErrorKind, FormatError
from .models import LeapSecond, LocalTimeType, TimestampWidth, Transition
from .reader import BinaryReader
from .tzif_header import TimeZoneInfoHeader

_LOGGER = logging.getLogger(__name__)

# 4-byte signed integer, 1-byte unsigned DST flag, 1-byte unsigned integer
_TTINFO_FORMAT = ">iBB"


def is_overflow(timestamp: int) -> bool:
    """
    Whether a 64-bit timestamp is out of range for safe calendar conversion:
    its most-significant byte is neither 0x00 nor 0xFF.
    """
    msb = (timestamp & 0xFFFFFFFFFFFFFFFF) >> 56
    return msb not in (0x00, 0xFF)


def resolve_abbreviations(pool: bytes) -> dict[int, str]:
    """
    Map the start offset of every NUL-terminated run in ``pool`` to its text.
    A trailing run without a terminator is not included.
    """
    runs: dict[int, str] = {}
    start = 0
    for position, byte in enumerate(pool):
        if byte == 0:
            runs[start] = pool[start:position].decode("ascii", errors="replace")
            start = position + 1
    return runs


class TimeZoneInfoBody:
    def __init__(
        self,
        width: TimestampWidth,
        transitions: Sequence[Transition],
        local_time_types: Sequence[LocalTimeType],
        leap_seconds: Sequence[LeapSecond],
        timezone_abbrevs: bytes = b"",
    ) -> None:
        self.width = width
        self.transitions = tuple(transitions)
        self.local_time_types = tuple(local_time_types)
        self.leap_seconds = tuple(leap_seconds)
        self._timezone_abbrevs = timezone_abbrevs

    @property
    def timezone_abbrevs(self) -> list[str]:
        seen: list[str] = []
        for ttinfo in self.local_time_types:
            if ttinfo.abbreviation not in seen:
                seen.append(ttinfo.abbreviation)
        return seen

    @property
    def abbreviation_pool(self) -> bytes:
        return self._timezone_abbrevs

    @classmethod
    def read(
        cls,
        reader: BinaryReader,
        header_data: TimeZoneInfoHeader,
        width: TimestampWidth = TimestampWidth.NARROW,
    ) -> "TimeZoneInfoBody":
        # Parse transition times
        transition_times = reader.read_ints(header_data.transitions_count, width.bits)

        # Parse local time type indices
        time_type_indices = reader.read_ints(header_data.transitions_count, 8)

        # Parse ttinfo structures
        ttinfos = cls._read_ttinfo_structures(
            reader, header_data.local_time_type_count
        )

        # Parse time zone designation strings
        timezone_abbrevs = reader.read_bytes(header_data.timezone_abbrev_byte_count)

        # Parse leap second data
        leap_seconds = cls._read_leap_seconds(
            reader, header_data.leap_second_transitions_count, width
        )

        # Parse standard/wall and UT/local indicators
        wall_standard_flags = cls._read_indicators(
            reader, header_data.wall_standard_flag_count, len(ttinfos)
        )
        is_utc_flags = cls._read_indicators(
            reader, header_data.is_utc_flag_count, len(ttinfos)
        )

        for index in time_type_indices:
            if not 0 <= index < len(ttinfos):
                raise FormatError(
                    f"Transition type index {index} out of range "
                    f"for {len(ttinfos)} local time types.",
                    ErrorKind.INVALID_TYPE_INDEX,
                )

        abbrevs = resolve_abbreviations(timezone_abbrevs)
        local_time_types = [
            LocalTimeType(
                utc_offset_secs=utc_offset_secs,
                is_dst=is_dst != 0,
                abbrev_index=abbrev_index,
                abbreviation=abbrevs.get(abbrev_index, ""),
                is_standard_time=wall_standard_flags[i],
                is_utc=is_utc_flags[i],
            )
            for i, (utc_offset_secs, is_dst, abbrev_index) in enumerate(ttinfos)
        ]
        transitions = [
            Transition(
                timestamp,
                type_index,
                width,
                width is TimestampWidth.WIDE and is_overflow(timestamp),
            )
            for timestamp, type_index in zip(transition_times, time_type_indices)
        ]

        _LOGGER.debug(
            "Read %d-bit block: %d transitions, %d local time types, %d leap seconds",
            width.bits,
            len(transitions),
            len(local_time_types),
            len(leap_seconds),
        )
        return cls(width, transitions, local_time_types, leap_seconds, timezone_abbrevs)

    @classmethod
    def _read_ttinfo_structures(
        cls, reader: BinaryReader, typecnt: int
    ) -> list[tuple[int, int, int]]:
        return [reader.read_struct(_TTINFO_FORMAT) for _ in range(typecnt)]  # type: ignore

    @classmethod
    def _read_leap_seconds(
        cls, reader: BinaryReader, count: int, width: TimestampWidth
    ) -> list[LeapSecond]:
        # Each leap-second entry is a pair: (transition_time, correction)
        fmt = ">qi" if width is TimestampWidth.WIDE else ">ii"
        return [LeapSecond(*reader.read_struct(fmt), width) for _ in range(count)]

    @classmethod
    def _read_indicators(
        cls, reader: BinaryReader, count: int, typecnt: int
    ) -> list[bool]:
        # A zero byte sets the flag; types beyond the table keep the default.
        flags = [False] * typecnt
        for i, indicator in enumerate(reader.read_bytes(count)):
            if i < typecnt:
                flags[i] = indicator == 0
        return flags

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZoneInfoBody):
            return NotImplemented
        return (
            self.width == other.width
            and self.transitions == other.transitions
            and self.local_time_types == other.local_time_types
            and self.leap_seconds == other.leap_seconds
            and self._timezone_abbrevs == other._timezone_abbrevs
        )

    def __repr__(self) -> str:
        return (
            f"TimeZoneInfoBody(width={self.width!r}, "
            f"transitions={self.transitions!r}, "
            f"local_time_types={self.local_time_types!r}, "
            f"leap_seconds={self.leap_seconds!r}, "
            f"timezone_abbrevs={self._timezone_abbrevs!r})"
        )
