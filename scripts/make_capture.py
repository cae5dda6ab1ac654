from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dcf77dec.synth import PULSE_GARBLED, bits_to_pulses, encode_telegram


def main() -> None:
	parser = argparse.ArgumentParser(description="Write a synthetic DCF77 raw-sample capture")
	parser.add_argument("out", help="Output file")
	parser.add_argument("--start", default="2024-01-15T10:05", help="Local time of the first telegram (ISO)")
	parser.add_argument("--minutes", type=int, default=3)
	parser.add_argument("--summer", action="store_true", help="MESZ instead of MEZ")
	parser.add_argument("--garble", type=int, action="append", default=[], help="Sample index to corrupt (repeatable)")
	args = parser.parse_args()

	tz = timezone(timedelta(hours=2 if args.summer else 1))
	start = datetime.fromisoformat(args.start).replace(tzinfo=tz)
	raw = bytearray()
	for k in range(args.minutes):
		raw += bits_to_pulses(encode_telegram(start + timedelta(minutes=k)))
	for i in args.garble:
		raw[i] = PULSE_GARBLED
	Path(args.out).write_bytes(bytes(raw))
	print(f"Wrote {len(raw)} samples to {args.out}")


if __name__ == "__main__":
	main()
