from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class TimestampWidth(Enum):
    """
    Width of the timestamps in a TZif data block.
    """

    NARROW = 32
    WIDE = 64

    @property
    def bits(self) -> int:
        return self.value


@dataclass(frozen=True)
class Transition:
    """
    Represents a transition time in a TZif file.
    """

    timestamp: int
    type_index: int
    width: TimestampWidth
    overflow: bool = False


@dataclass(frozen=True)
class LocalTimeType:
    """
    Represents a ttinfo structure in a TZif file, with its abbreviation and
    indicator flags already resolved.
    """

    utc_offset_secs: int
    is_dst: bool
    abbrev_index: int
    abbreviation: str = ""
    is_standard_time: bool = False
    is_utc: bool = False


@dataclass(frozen=True)
class LeapSecond:
    """
    Represents a leap second entry in a TZif file.
    """

    transition_time: int
    correction: int
    width: TimestampWidth


SENTINEL_TRANSITION = Transition(
    timestamp=-1, type_index=-1, width=TimestampWidth.NARROW, overflow=False
)

SENTINEL_LOCAL_TIME_TYPE = LocalTimeType(
    utc_offset_secs=-1,
    is_dst=False,
    abbrev_index=-1,
    abbreviation="",
    is_standard_time=False,
    is_utc=False,
)


@dataclass(frozen=True)
class TransitionLookup:
    """
    Result of a transition lookup. Unpacks as ``(transition, local_time_type)``
    and is falsy when the index was out of range.
    """

    transition: Transition
    local_time_type: LocalTimeType
    found: bool

    def __iter__(self) -> Iterator:
        return iter((self.transition, self.local_time_type))

    def __bool__(self) -> bool:
        return self.found

    @classmethod
    def not_found(cls) -> "TransitionLookup":
        return cls(SENTINEL_TRANSITION, SENTINEL_LOCAL_TIME_TYPE, False)
