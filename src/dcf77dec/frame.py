from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Tuple, Union

import numpy as np

from .bitrep import Bit, BitLike, as_bit, bit_len, bits_to_str, to_bit_vector
from .constants import FRAME_LENGTH


class FrameBuffer:
    """Sliding window over the last ``capacity`` seconds, oldest first.

    Appending to a full buffer drops the oldest bit. Not thread safe: a host
    that feeds and decodes from different threads must hold one lock around
    both operations.
    """

    def __init__(self, capacity: int = FRAME_LENGTH):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._bits: Deque[Bit] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._bits)

    def __str__(self) -> str:
        return bits_to_str(self._bits)

    def __repr__(self) -> str:
        return f"FrameBuffer({len(self)}/{self.capacity} {str(self)!r})"

    def is_full(self) -> bool:
        return len(self._bits) == self.capacity

    def clear(self) -> None:
        self._bits.clear()

    def append(self, bit: BitLike) -> None:
        self._bits.append(as_bit(bit))

    def append_many(self, bits: Iterable[BitLike]) -> None:
        """Append in order; of an overlong input only the last ``capacity`` bits remain."""
        self._bits.extend(as_bit(b) for b in bits)

    def add_bits(self, count: int, value: Union[int, np.integer]) -> None:
        """Append the ``count`` least significant bits of a fixed-width value, lsb first."""
        if not 0 <= count <= bit_len(value):
            raise ValueError(f"cannot take {count} bits from a {bit_len(value)}-bit value")
        self.append_many(bool(b) for b in to_bit_vector(value)[:count])

    def snapshot(self) -> Tuple[Bit, ...]:
        return tuple(self._bits)

    def get(self, index: int) -> Bit:
        """Bit at ``index`` (0 = oldest). Raises IndexError unless 0 <= index < len(self)."""
        if not 0 <= index < len(self._bits):
            raise IndexError(f"frame index {index} out of range")
        return self._bits[index]
