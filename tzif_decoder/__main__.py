import argparse
import logging
import os
import sys

from .errors import TZifError
from .models import LocalTimeType
from .tzif import TimeZoneFile


def _describe(info: LocalTimeType) -> str:
    return (
        f"Offset: {info.utc_offset_secs}, is DST: {info.is_dst}, "
        f"abbreviation ({info.abbrev_index}): {info.abbreviation}, "
        f"{'Standard' if info.is_standard_time else 'Wall clock'}, "
        f"{'UTC' if info.is_utc else 'local'}"
    )


def dump(tz_file: TimeZoneFile) -> None:
    print(f"{tz_file.timezone_name} (version {tz_file.version.value})")
    print(f"Transitions: {tz_file.transition_count()}")
    print(f"Local time types: {len(tz_file.local_time_types)}")
    print(f"Leap seconds: {len(tz_file.leap_seconds)}")

    for index in range(tz_file.transition_count()):
        _, info = tz_file.transition_at(index)
        when = tz_file.transition_time(index)
        stamp = "<overflow>" if when is None else when.isoformat()
        print(f"{stamp} - {_describe(info)}")

    for index, leap in enumerate(tz_file.leap_seconds):
        leap_time = tz_file.leap_second_time(index)
        print(f"- {leap_time.isoformat()}, step {leap.correction}")

    if tz_file.footer is not None:
        print(f"Footer: {tz_file.footer}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="tzif_decoder", description="Dump the contents of a TZif file."
    )
    parser.add_argument("zone", help="IANA key (e.g. Europe/Paris) or file path")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if os.path.isabs(args.zone) or os.path.isfile(args.zone):
            tz_file = TimeZoneFile.from_path(args.zone)
        else:
            tz_file = TimeZoneFile.read(args.zone)
    except (TZifError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    dump(tz_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
