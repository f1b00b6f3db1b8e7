"""Dump the lines or things in a map from a WAD file as JSON."""
from typing import Any, List, Optional
import argparse
import json
import sys

from wadtools.const import WADFormat
from wadtools.logger import get_logger, init_logging
from wadtools.wad import WAD, InvalidFormat, MapSelector


LOGGER = get_logger(__name__)


def main(args: Optional[List[str]] = None) -> None:
    """Main script."""
    parser = argparse.ArgumentParser(description=__doc__)

    parser.add_argument(
        "-t", "--things",
        help="dump the things placed in the map, instead of the lines.",
        action='store_true',
    )
    parser.add_argument(
        "-f", "--format",
        help="the game dialect of the WAD. This is recorded, but does not change decoding.",
        choices=[fmt.name.lower() for fmt in WADFormat],
        default=WADFormat.DEFAULT.name.lower(),
    )
    parser.add_argument(
        "-i", "--indent",
        help="indent the JSON output by this many spaces.",
        type=int,
        default=None,
    )
    parser.add_argument(
        "filename",
        help="the WAD file to read.",
    )
    parser.add_argument(
        "map",
        help="the map to dump, either in the form E1M1 or MAP01.",
    )

    result = parser.parse_args(args)
    init_logging()

    try:
        selector = MapSelector.parse(result.map)
    except ValueError as exc:
        parser.error(str(exc))

    with open(result.filename, 'rb') as f:
        data = f.read()

    try:
        wad = WAD(data, WADFormat[result.format.upper()])
    except InvalidFormat as exc:
        LOGGER.error('Cannot read "{}": {}', result.filename, exc)
        sys.exit(1)

    LOGGER.debug('Loaded {}', wad)
    records: List[Any]
    if result.things:
        records = [thing.as_dict() for thing in wad.things(selector)]
    else:
        records = [line.as_dict() for line in wad.linedefs(selector)]
    if not records:
        LOGGER.warning('No data found for {} in "{}".', selector, result.filename)

    json.dump(records, sys.stdout, indent=result.indent)
    sys.stdout.write('\n')


if __name__ == '__main__':
    main(sys.argv[1:])
