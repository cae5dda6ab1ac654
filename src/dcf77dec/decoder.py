from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import DTypeLike

from .bitrep import Bit, BitLike, as_bit, from_maybebits_lsb, to_bit
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
    TIMEZONES,
    WEEKDAY_BITS,
    YEAR_BASE,
    YEAR_ONES,
    YEAR_TENS,
)
from .frame import FrameBuffer
from .pulse import decode_pulse
from .types import (
    BCDNotBigEnoughError,
    InvalidTimezoneBitsError,
    MissingBitError,
    MissingStartOfTimeCodeError,
    NotEnoughBitsError,
    NotSyncError,
    ParityError,
    ParityGroup,
    Telegram,
)

logger = logging.getLogger(__name__)

Span = Tuple[int, int]


def _field(bits: Sequence[Bit], span: Span, dtype: DTypeLike = np.int8) -> int:
    v = from_maybebits_lsb(bits[span[0]:span[1]], dtype)
    if v is None:
        raise MissingBitError(span)
    return int(v)


def _check_parity(bits: Sequence[Bit], span: Span, group: ParityGroup) -> None:
    """Even parity: XOR over the whole span, parity bit included, must be 0."""
    values = [b.to_bit() for b in bits[span[0]:span[1]]]
    if any(v is None for v in values):
        raise MissingBitError(span)
    if np.bitwise_xor.reduce(np.array(values, dtype=np.uint8)):
        raise ParityError(group)


def _bcd(bits: Sequence[Bit], ones: Span, tens: Span, dtype: DTypeLike = np.int8) -> int:
    if np.iinfo(dtype).max < 10:
        raise BCDNotBigEnoughError(f"{np.dtype(dtype)} cannot hold the BCD tens multiplier")
    return _field(bits, tens, dtype) * 10 + _field(bits, ones, dtype)


def decode_telegram(bits: Sequence[BitLike]) -> Telegram:
    """Decode one minute of DCF77 bits, second 0 first.

    Checks run in a fixed order and the first failure is raised: completeness,
    minute marker, timezone, start bit, then parity and BCD of minute, hour
    and date. Range errors of the calendar values are left to
    Telegram.to_datetime().
    """
    frame = [as_bit(b) for b in bits]
    if len(frame) < FRAME_LENGTH:
        raise NotEnoughBitsError(f"need {FRAME_LENGTH} bits, have {len(frame)}")
    if len(frame) > FRAME_LENGTH:
        raise ValueError(f"a telegram has exactly {FRAME_LENGTH} bits, got {len(frame)}")

    if frame[SYNC_BIT] is not Bit.SKIPPED:
        raise NotSyncError(f"bit {SYNC_BIT} is {frame[SYNC_BIT]!s}, expected no pulse")

    tz_code = _field(frame, TIMEZONE_BITS, np.uint8)
    if tz_code not in TIMEZONES:
        raise InvalidTimezoneBitsError(tz_code)
    tz_name, utc_offset = TIMEZONES[tz_code]

    if frame[START_OF_TIME_CODE_BIT] is not Bit.ONE:
        raise MissingStartOfTimeCodeError(f"bit {START_OF_TIME_CODE_BIT} is {frame[START_OF_TIME_CODE_BIT]!s}")

    _check_parity(frame, MINUTE_PARITY_SPAN, ParityGroup.MINUTE)
    minute = _bcd(frame, MINUTE_ONES, MINUTE_TENS)

    _check_parity(frame, HOUR_PARITY_SPAN, ParityGroup.HOUR)
    hour = _bcd(frame, HOUR_ONES, HOUR_TENS)

    _check_parity(frame, DATE_PARITY_SPAN, ParityGroup.DATE)
    day = _bcd(frame, DAY_ONES, DAY_TENS)
    month = _bcd(frame, MONTH_ONES, MONTH_TENS)
    year = YEAR_BASE + _bcd(frame, YEAR_ONES, YEAR_TENS)
    weekday = _field(frame, WEEKDAY_BITS)

    telegram = Telegram(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        year=year,
        tz_name=tz_name,
        utc_offset=utc_offset,
        weekday=weekday or None,
        call_bit=to_bit(frame[CALL_BIT]),
        dst_announcement=to_bit(frame[DST_ANNOUNCE_BIT]),
        leap_second_announcement=to_bit(frame[LEAP_ANNOUNCE_BIT]),
    )
    logger.debug("decoded %s", telegram)
    return telegram


def decode_datetime(bits: Sequence[BitLike]) -> datetime:
    return decode_telegram(bits).to_datetime()


class Decoder:
    """Raw samples in, one decode attempt per request out.

    Each decode works on a snapshot of the current window; a failed decode
    leaves the window untouched and further samples can be appended.
    """

    def __init__(self) -> None:
        self.buffer = FrameBuffer(FRAME_LENGTH)

    def __len__(self) -> int:
        return len(self.buffer)

    def __str__(self) -> str:
        return str(self.buffer)

    def is_full(self) -> bool:
        return self.buffer.is_full()

    def append(self, sample: int) -> Bit:
        """Pulse-decode one raw sample byte and push it; returns the decoded bit."""
        bit = decode_pulse(sample)
        self.buffer.append(bit)
        return bit

    def add_bit(self, bit: Bit) -> "Decoder":
        self.buffer.append(bit)
        return self

    def add_maybe_bit(self, value: BitLike) -> "Decoder":
        self.buffer.append(as_bit(value))
        return self

    def add_bits(self, count: int, value: Union[int, np.integer]) -> "Decoder":
        self.buffer.add_bits(count, value)
        return self

    def get_bit(self, index: int) -> Bit:
        return self.buffer.get(index)

    def clear(self) -> None:
        self.buffer.clear()

    def decode_telegram(self) -> Telegram:
        if not self.buffer.is_full():
            raise NotEnoughBitsError(f"need {FRAME_LENGTH} bits, have {len(self.buffer)}")
        return decode_telegram(self.buffer.snapshot())

    def decode(self) -> datetime:
        """Decode the current window into an offset-aware datetime.

        Raises a DecodingError subclass if the window is not a valid telegram.
        """
        return self.decode_telegram().to_datetime()
