from .errors import (
    ErrorKind,
    FormatError,
    MagicMismatchError,
    TruncatedStreamError,
    TZifError,
    UnreadableSourceError,
)
from .models import (
    LeapSecond,
    LocalTimeType,
    TimestampWidth,
    Transition,
    TransitionLookup,
)
from .tzif import DecodeResult, TimeZoneFile
from .tzif_header import FormatVersion

__all__ = [
    "DecodeResult",
    "ErrorKind",
    "FormatError",
    "FormatVersion",
    "LeapSecond",
    "LocalTimeType",
    "MagicMismatchError",
    "TimeZoneFile",
    "TimestampWidth",
    "Transition",
    "TransitionLookup",
    "TruncatedStreamError",
    "TZifError",
    "UnreadableSourceError",
]
