from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List

import numpy as np

from .bitrep import Bit, to_bit_vector
from .constants import (
    CALL_BIT,
    DATE_PARITY_SPAN,
    DAY_ONES,
    DAY_TENS,
    DST_ANNOUNCE_BIT,
    FRAME_LENGTH,
    HOUR_ONES,
    HOUR_PARITY_SPAN,
    HOUR_TENS,
    LEAP_ANNOUNCE_BIT,
    MINUTE_ONES,
    MINUTE_PARITY_SPAN,
    MINUTE_TENS,
    MONTH_ONES,
    MONTH_TENS,
    START_OF_TIME_CODE_BIT,
    SYNC_BIT,
    TIMEZONE_BITS,
    WEEKDAY_BITS,
    YEAR_BASE,
    YEAR_ONES,
    YEAR_TENS,
)

# Raw UART samples for each bit: 100 ms and 200 ms pulses, no pulse, and a
# broken (non-contiguous) pattern.
PULSE_ZERO = 0x0F
PULSE_ONE = 0xFF
PULSE_NONE = 0x00
PULSE_GARBLED = 0x05

_PULSE_OF = {
    Bit.ZERO: PULSE_ZERO,
    Bit.ONE: PULSE_ONE,
    Bit.SKIPPED: PULSE_NONE,
    Bit.UNKNOWN: PULSE_GARBLED,
}


def _put(frame: List[Bit], start: int, stop: int, value: int) -> None:
    width = stop - start
    if not 0 <= value < (1 << width):
        raise ValueError(f"{value} does not fit into bits {start}..{stop - 1}")
    for i, b in enumerate(to_bit_vector(np.uint8(value))[:width]):
        frame[start + i] = Bit.from_bool(bool(b))


def _put_bcd(frame: List[Bit], ones: tuple, tens: tuple, value: int) -> None:
    _put(frame, ones[0], ones[1], value % 10)
    _put(frame, tens[0], tens[1], value // 10)


def _set_parity(frame: List[Bit], span: tuple) -> None:
    covered = frame[span[0]:span[1] - 1]
    ones = sum(1 for b in covered if b is Bit.ONE)
    frame[span[1] - 1] = Bit.from_bool(ones % 2 == 1)


def encode_telegram(
    dt: datetime,
    *,
    call_bit: bool = False,
    dst_announcement: bool = False,
    leap_second_announcement: bool = False,
) -> List[Bit]:
    """Build the 60 bits broadcast during the minute *before* ``dt``.

    ``dt`` must carry a UTC offset of +1 h (MEZ) or +2 h (MESZ). Bits 0-14
    are sent as zeros.
    """
    offset = dt.utcoffset()
    if offset == timedelta(hours=1):
        z1, z2 = False, True
    elif offset == timedelta(hours=2):
        z1, z2 = True, False
    else:
        raise ValueError(f"DCF77 only carries UTC+1 or UTC+2, got {offset}")
    year = dt.year - YEAR_BASE
    if not 0 <= year <= 99:
        raise ValueError(f"year {dt.year} outside {YEAR_BASE}..{YEAR_BASE + 99}")

    frame = [Bit.ZERO] * FRAME_LENGTH
    frame[CALL_BIT] = Bit.from_bool(call_bit)
    frame[DST_ANNOUNCE_BIT] = Bit.from_bool(dst_announcement)
    frame[TIMEZONE_BITS[0]] = Bit.from_bool(z1)
    frame[TIMEZONE_BITS[0] + 1] = Bit.from_bool(z2)
    frame[LEAP_ANNOUNCE_BIT] = Bit.from_bool(leap_second_announcement)
    frame[START_OF_TIME_CODE_BIT] = Bit.ONE

    _put_bcd(frame, MINUTE_ONES, MINUTE_TENS, dt.minute)
    _set_parity(frame, MINUTE_PARITY_SPAN)
    _put_bcd(frame, HOUR_ONES, HOUR_TENS, dt.hour)
    _set_parity(frame, HOUR_PARITY_SPAN)

    _put_bcd(frame, DAY_ONES, DAY_TENS, dt.day)
    _put(frame, WEEKDAY_BITS[0], WEEKDAY_BITS[1], dt.isoweekday())
    _put_bcd(frame, MONTH_ONES, MONTH_TENS, dt.month)
    _put_bcd(frame, YEAR_ONES, YEAR_TENS, year)
    _set_parity(frame, DATE_PARITY_SPAN)

    frame[SYNC_BIT] = Bit.SKIPPED
    return frame


def bits_to_pulses(bits: Iterable[Bit]) -> bytes:
    """Raw sample bytes that decode_pulse maps back onto ``bits``."""
    return bytes(_PULSE_OF[b] for b in bits)
