"""DCF77 time-signal decoder.

Public API:
- Decoder: feed raw per-second samples, decode() -> offset-aware datetime
- decode_telegram(bits) -> Telegram, decode_datetime(bits) -> datetime
- decode_pulse(byte) -> Bit
- FrameBuffer: 60-second sliding window
"""
from .bitrep import Bit, from_bits_lsb, from_bits_msb, from_maybebits_lsb, from_maybebits_msb, to_bit_vector
from .constants import DECODE_HEADER, FRAME_LENGTH, Dcf77Constants
from .decoder import Decoder, decode_datetime, decode_telegram
from .frame import FrameBuffer
from .pulse import decode_pulse, decode_pulses
from .types import (
    BCDNotBigEnoughError,
    DecodingError,
    InvalidDateTimeError,
    InvalidTimezoneBitsError,
    MissingBitError,
    MissingStartOfTimeCodeError,
    NotEnoughBitsError,
    NotSyncError,
    ParityError,
    ParityGroup,
    Telegram,
)

__all__ = [
    "Bit",
    "from_bits_lsb",
    "from_bits_msb",
    "from_maybebits_lsb",
    "from_maybebits_msb",
    "to_bit_vector",
    "DECODE_HEADER",
    "FRAME_LENGTH",
    "Dcf77Constants",
    "Decoder",
    "decode_datetime",
    "decode_telegram",
    "FrameBuffer",
    "decode_pulse",
    "decode_pulses",
    "BCDNotBigEnoughError",
    "DecodingError",
    "InvalidDateTimeError",
    "InvalidTimezoneBitsError",
    "MissingBitError",
    "MissingStartOfTimeCodeError",
    "NotEnoughBitsError",
    "NotSyncError",
    "ParityError",
    "ParityGroup",
    "Telegram",
]
