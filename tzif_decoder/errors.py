from enum import Enum


class ErrorKind(Enum):
    """
    Reason a TZif decode failed.
    """

    MAGIC_MISMATCH = "magic_mismatch"
    TRUNCATED_STREAM = "truncated_stream"
    UNREADABLE_SOURCE = "unreadable_source"
    MALFORMED_HEADER = "malformed_header"
    INVALID_TYPE_INDEX = "invalid_type_index"


class TZifError(Exception):
    """
    Base class for every decode failure raised by this package.
    """

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind) -> None:
        super().__init__(message)
        self.kind = kind


class FormatError(TZifError, ValueError):
    def __init__(
        self, message: str, kind: ErrorKind = ErrorKind.MALFORMED_HEADER
    ) -> None:
        super().__init__(message, kind)


class MagicMismatchError(FormatError):
    def __init__(self, magic: bytes) -> None:
        super().__init__(
            f"Invalid TZif file: Magic sequence not found (got {magic!r}).",
            ErrorKind.MAGIC_MISMATCH,
        )
        self.magic = magic


class TruncatedStreamError(FormatError):
    def __init__(self, position: int, requested: int, available: int) -> None:
        super().__init__(
            f"Unexpected end of stream at byte {position}: "
            f"needed {requested} bytes, got {available}.",
            ErrorKind.TRUNCATED_STREAM,
        )
        self.position = position
        self.requested = requested
        self.available = available


class UnreadableSourceError(TZifError, FileNotFoundError):
    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.UNREADABLE_SOURCE)
