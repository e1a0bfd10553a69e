import struct
from typing import IO

from .errors import TruncatedStreamError

# struct codes keyed by integer width in bits
_INT_FORMATS = {8: "b", 16: "h", 32: "i", 64: "q"}

# Upper bound for a single read; header counts are untrusted.
_CHUNK_SIZE = 64 * 1024


class BinaryReader:
    """
    Sequential big-endian reader over a binary stream.

    Tracks how many bytes have been consumed so truncation errors can report
    where the stream ran out. A read that cannot be satisfied in full raises
    ``TruncatedStreamError`` and marks the reader invalid.
    """

    def __init__(self, file: IO[bytes]) -> None:
        self._file = file
        self._position = 0
        self._valid = True

    @property
    def position(self) -> int:
        return self._position

    @property
    def valid(self) -> bool:
        return self._valid

    def read_bytes(self, size: int) -> bytes:
        data = bytearray()
        while len(data) < size:
            chunk = self._file.read(min(size - len(data), _CHUNK_SIZE))
            if not chunk:
                break
            data += chunk
        if len(data) != size:
            self._valid = False
            raise TruncatedStreamError(self._position, size, len(data))
        self._position += size
        return bytes(data)

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_struct(self, format_: str) -> tuple:
        return struct.unpack(format_, self.read_bytes(struct.calcsize(format_)))

    def read_int(self, width: int, signed: bool = True) -> int:
        return self.read_ints(1, width, signed)[0]

    def read_ints(self, count: int, width: int, signed: bool = True) -> list[int]:
        if width not in _INT_FORMATS:
            raise ValueError(f"Unsupported integer width: {width}")
        code = _INT_FORMATS[width] if signed else _INT_FORMATS[width].upper()
        return list(self.read_struct(f">{count}{code}"))

    def read_line(self) -> bytes:
        """Read up to and including the next newline; empty at end of stream."""
        line = self._file.readline()
        self._position += len(line)
        return line
