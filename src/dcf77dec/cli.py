from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .bitrep import Bit
from .constants import DECODE_HEADER
from .pulse import format_sample
from .receiver import Receiver
from .source import open_source

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode DCF77 telegrams from raw per-second pulse samples")
    parser.add_argument("source", nargs="?", default="-", help="Capture file or configured serial device, '-' for stdin")
    parser.add_argument("--show-window", action="store_true", help="Print the 60-bit window under a column legend before each decode")
    parser.add_argument("--raw", action="store_true", help="Print every raw sample in binary")
    parser.add_argument("--max-samples", type=int, default=None, help="Stop after this many samples")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeat for debug)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser


def _log_level(verbose: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=_log_level(args.verbose, args.quiet), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    def on_sample(sample: int, bit: Bit) -> None:
        if args.raw:
            print(f"{format_sample(sample)} {bit}")

    try:
        source = open_source(args.source)
    except OSError as e:
        logger.error("cannot open %s: %s", args.source, e)
        return 1

    decoded = 0
    try:
        for result in Receiver(source, on_sample=on_sample).minutes(args.max_samples):
            if args.show_window:
                print(DECODE_HEADER)
                print(result.window)
            if result.ok:
                decoded += 1
                print(result.time.isoformat())
    except KeyboardInterrupt:
        pass
    finally:
        source.close()
    logger.info("%d minute(s) decoded", decoded)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
