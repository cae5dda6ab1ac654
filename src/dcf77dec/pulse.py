from __future__ import annotations

from typing import List, Union

import numpy as np
from numpy.typing import NDArray

from .bitrep import Bit
from .constants import Dcf77Constants

_CONST = Dcf77Constants()


def decode_pulse(pulse: int) -> Bit:
    """Classify one raw UART sample byte.

    The set bits must be a run of ones starting at bit 0; anything else is
    UNKNOWN. No bits set means no pulse this second (SKIPPED). Since the start
    bit already covers the first 20 ms, the pulse lasted 20 ms * (ones + 1),
    so more than four ones means longer than 100 ms, i.e. a 1.
    """
    pulse = int(pulse)
    if not 0 <= pulse <= 0xFF:
        raise ValueError(f"sample must be a byte value, got {pulse}")
    if ((pulse + 1) & 0xFF) & pulse:
        return Bit.UNKNOWN
    if pulse == 0:
        return Bit.SKIPPED
    return Bit.from_bool(pulse > _CONST.short_pulse_max)


def decode_pulses(samples: Union[bytes, bytearray, NDArray[np.uint8]]) -> List[Bit]:
    """Vectorised decode_pulse over a block of samples."""
    if isinstance(samples, (bytes, bytearray)):
        p = np.frombuffer(bytes(samples), dtype=np.uint8)
    else:
        p = np.asarray(samples)
        if p.size and (p.min() < 0 or p.max() > 0xFF):
            raise ValueError("samples must be byte values")
        p = p.astype(np.uint8)
    contiguous = ((p + np.uint8(1)) & p) == 0  # uint8 arithmetic wraps at 0xFF
    out = np.full(p.shape, 0, dtype=np.int8)  # 0 unknown, 1 skipped, 2 zero, 3 one
    out[contiguous & (p == 0)] = 1
    out[contiguous & (p != 0) & (p <= _CONST.short_pulse_max)] = 2
    out[contiguous & (p > _CONST.short_pulse_max)] = 3
    lut = (Bit.UNKNOWN, Bit.SKIPPED, Bit.ZERO, Bit.ONE)
    return [lut[int(k)] for k in out.ravel()]


def format_sample(pulse: int) -> str:
    """Raw sample as zero-padded binary, one column per 20 ms sub-interval."""
    return f"{int(pulse):010b}"
