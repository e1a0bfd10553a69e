import io
import logging
import os
import sysconfig
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from importlib import resources
from typing import IO

from .errors import TZifError, UnreadableSourceError
from .models import (
    LeapSecond,
    LocalTimeType,
    TimestampWidth,
    Transition,
    TransitionLookup,
)
from .reader import BinaryReader
from .tzif_body import TimeZoneInfoBody
from .tzif_header import FormatVersion, TimeZoneInfoHeader

_LOGGER = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class DecodeResult:
    """
    Outcome of a decode that reports failure instead of raising.
    """

    tz_file: "TimeZoneFile | None" = None
    error: TZifError | None = None

    @property
    def ok(self) -> bool:
        return self.tz_file is not None and self.error is None

    def __bool__(self) -> bool:
        return self.ok


class TimeZoneFile:
    def __init__(
        self,
        timezone_name: str,
        filepath: str,
        header_data: TimeZoneInfoHeader,
        body_data: TimeZoneInfoBody,
        v2_header_data: TimeZoneInfoHeader | None = None,
        v2_body_data: TimeZoneInfoBody | None = None,
        footer: str | None = None,
    ) -> None:
        self.timezone_name = timezone_name
        self.filepath = filepath
        self._header_data = header_data
        self._body_data = body_data
        self._v2_header_data = v2_header_data
        self._v2_body_data = v2_body_data
        self._footer = footer

    @property
    def version(self) -> FormatVersion:
        return self._header_data.version

    @property
    def header(self) -> TimeZoneInfoHeader:
        if self._v2_header_data is None:
            return self._header_data
        return self._v2_header_data

    @property
    def body(self) -> TimeZoneInfoBody:
        if self._v2_body_data is None:
            return self._body_data
        return self._v2_body_data

    @property
    def footer(self) -> str | None:
        return self._footer

    @property
    def transitions(self) -> tuple[Transition, ...]:
        return self.body.transitions

    @property
    def local_time_types(self) -> tuple[LocalTimeType, ...]:
        return self.body.local_time_types

    @property
    def leap_seconds(self) -> tuple[LeapSecond, ...]:
        # Unlike transitions, leap seconds accumulate over both blocks.
        if self._v2_body_data is None:
            return self._body_data.leap_seconds
        return self._body_data.leap_seconds + self._v2_body_data.leap_seconds

    @property
    def timezone_abbrevs(self) -> list[str]:
        return self.body.timezone_abbrevs

    def transition_count(self) -> int:
        return len(self.body.transitions)

    def transition_at(self, index: int) -> TransitionLookup:
        """
        Return the transition at ``index`` together with the local time type
        it selects. Out-of-range indices do not raise: the result carries the
        sentinel records (timestamp -1, type index -1, offset -1) and
        ``found`` is False.
        """
        if not 0 <= index < self.transition_count():
            return TransitionLookup.not_found()
        transition = self.body.transitions[index]
        return TransitionLookup(
            transition, self.body.local_time_types[transition.type_index], True
        )

    def find_transition(self, index: int) -> TransitionLookup | None:
        lookup = self.transition_at(index)
        return lookup if lookup.found else None

    def transition_time(self, index: int) -> datetime | None:
        """
        UTC instant of the transition at ``index``, or None when the index is
        out of range or the timestamp overflowed.
        """
        lookup = self.find_transition(index)
        if lookup is None or lookup.transition.overflow:
            return None
        return self._to_datetime(lookup.transition.timestamp)

    def leap_second_time(self, index: int) -> datetime | None:
        """UTC instant of the leap second at ``index``, or None when out of range."""
        if not 0 <= index < len(self.leap_seconds):
            return None
        return self._to_datetime(self.leap_seconds[index].transition_time)

    def transition_time_local(self, index: int) -> datetime | None:
        utc_time = self.transition_time(index)
        if utc_time is None:
            return None
        offset = self.transition_at(index).local_time_type.utc_offset_secs
        try:
            return utc_time.astimezone(timezone(timedelta(seconds=offset)))
        except OverflowError:
            return utc_time

    @staticmethod
    def _to_datetime(timestamp: int) -> datetime:
        try:
            return _EPOCH + timedelta(seconds=timestamp)
        except OverflowError:
            clamped = datetime.max if timestamp > 0 else datetime.min
            return clamped.replace(tzinfo=timezone.utc)

    @classmethod
    def _read_from_fileobj(
        cls, file: IO[bytes], timezone_name: str, filepath: str
    ) -> "TimeZoneFile":
        reader = BinaryReader(file)
        header_data = TimeZoneInfoHeader.read(reader)
        body_data = TimeZoneInfoBody.read(reader, header_data, TimestampWidth.NARROW)
        if not header_data.version.has_extended_block:
            return cls(timezone_name, filepath, header_data, body_data)

        # The second header keeps the 32-bit layout; only its data block is wide.
        v2_header_data = TimeZoneInfoHeader.read(reader)
        v2_body_data = TimeZoneInfoBody.read(
            reader, v2_header_data, TimestampWidth.WIDE
        )
        footer = cls._read_footer(reader)

        return cls(
            timezone_name,
            filepath,
            header_data,
            body_data,
            v2_header_data,
            v2_body_data,
            footer,
        )

    @staticmethod
    def _read_footer(reader: BinaryReader) -> str | None:
        # Footer is "\n<TZ string>\n"; kept verbatim, not interpreted.
        if reader.read_line() != b"\n":
            return None
        footer = reader.read_line().rstrip(b"\n\x00")
        if not footer:
            return None
        return footer.decode("ascii", errors="replace")

    @classmethod
    def from_fileobj(
        cls, file: IO[bytes], timezone_name: str = "<stream>", filepath: str = ""
    ) -> "TimeZoneFile":
        return cls._read_from_fileobj(file, timezone_name, filepath)

    @classmethod
    def from_bytes(cls, data: bytes, timezone_name: str = "<bytes>") -> "TimeZoneFile":
        with io.BytesIO(data) as file:
            return cls._read_from_fileobj(file, timezone_name, "")

    @classmethod
    def read(cls, timezone_name: str) -> "TimeZoneFile":
        if os.path.isabs(timezone_name):
            raise ValueError(
                "Absolute paths are not allowed in TimeZoneFile.read(); use from_path() instead."
            )

        normalized_name = cls._validate_timezone_key(timezone_name)

        search_paths: list[str] = []
        tzdir_override = os.environ.get("TZDIR")
        if tzdir_override:
            search_paths.append(os.path.realpath(tzdir_override))
        search_paths.extend(cls._compute_default_tzpath())

        for tz_root in search_paths:
            candidate = os.path.join(tz_root, normalized_name)
            if os.path.isfile(candidate):
                _LOGGER.debug("Resolved %s to %s", timezone_name, candidate)
                return cls.from_path(candidate, timezone_name)

        # Fallback to tzdata package if present
        file = cls._load_tzdata_from_package(normalized_name)
        _LOGGER.debug("Resolved %s from the tzdata package", timezone_name)
        with file as f:
            return cls._read_from_fileobj(f, timezone_name, f"tzdata:{normalized_name}")

    @classmethod
    def from_path(cls, path: str, timezone_name: str | None = None) -> "TimeZoneFile":
        """Read a TZif file directly from a filesystem path."""
        real = os.path.realpath(path)
        try:
            file = open(real, "rb")
        except OSError as exc:
            raise UnreadableSourceError(f"Cannot open TZif file {path!r}: {exc}") from exc
        with file:
            return cls._read_from_fileobj(file, timezone_name or real, real)

    @classmethod
    def decode(cls, path: str, timezone_name: str | None = None) -> DecodeResult:
        """Like from_path(), but reports failure in the result instead of raising."""
        try:
            return DecodeResult(cls.from_path(path, timezone_name))
        except TZifError as exc:
            _LOGGER.debug("Failed to decode %s: %s", path, exc)
            return DecodeResult(error=exc)

    @classmethod
    def decode_bytes(cls, data: bytes, timezone_name: str = "<bytes>") -> DecodeResult:
        try:
            return DecodeResult(cls.from_bytes(data, timezone_name))
        except TZifError as exc:
            _LOGGER.debug("Failed to decode %s: %s", timezone_name, exc)
            return DecodeResult(error=exc)

    def __repr__(self) -> str:
        return (
            f"TimeZoneFile(timezone_name={self.timezone_name!r}, "
            f"filepath={self.filepath!r}, "
            f"header_data={self._header_data!r}, "
            f"body_data={self._body_data!r}, "
            f"v2_header_data={self._v2_header_data!r}, "
            f"v2_body_data={self._v2_body_data!r}, "
            f"footer={self._footer!r})"
        )

    @staticmethod
    def _compute_default_tzpath() -> tuple[str, ...]:
        env_var = os.environ.get("PYTHONTZPATH") or sysconfig.get_config_var("TZPATH")
        if env_var:
            return tuple(path for path in env_var.split(os.pathsep) if path)

        # Fallback paths align with CPython's defaults
        return (
            "/usr/share/zoneinfo",
            "/usr/share/lib/zoneinfo",
            "/etc/zoneinfo",
        )

    @staticmethod
    def _validate_timezone_key(key: str) -> str:
        if os.path.isabs(key):
            raise ValueError("Absolute paths are not allowed as timezone keys")

        # Normalize and ensure the normalized form does not change length (prevents ../)
        normalized = os.path.normpath(key)
        if len(normalized) != len(key) or normalized in (os.curdir, os.pardir, ""):
            raise ValueError(f"Invalid timezone name: {key!r}")

        # Ensure the path stays within a sentinel base
        _base = os.path.normpath(os.path.join("_", "_"))[:-1]
        resolved = os.path.normpath(os.path.join(_base, normalized))
        if not resolved.startswith(_base):
            raise ValueError(f"Invalid timezone name: {key!r}")

        return normalized

    @staticmethod
    def _load_tzdata_from_package(key: str) -> IO[bytes]:
        components = key.split("/")
        package_name = ".".join(["tzdata.zoneinfo"] + components[:-1])
        resource_name = components[-1]
        try:
            return resources.files(package_name).joinpath(resource_name).open("rb")
        except (ImportError, OSError, UnicodeEncodeError) as exc:
            raise UnreadableSourceError(
                f"No time zone found with key {key!r}"
            ) from exc
