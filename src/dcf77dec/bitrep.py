from __future__ import annotations

"""
Tri-state bit representation and fixed-width integer <-> bit conversions.

Two capabilities are kept apart:
- a *pure* bit source always yields a definite bool (``to_bool``),
- a *maybe* bit source yields ``Optional[bool]`` (``to_bit``).
Every pure source is also a maybe source that never yields ``None``.

Fixed-width integers are numpy scalars (uint8/16/32, int8/16/32, ...). Plain
Python ints are read as int32.
"""

import enum
from typing import Iterable, List, Optional, Protocol, Reversible, Sequence, Union, runtime_checkable

import numpy as np
from numpy.typing import DTypeLike, NDArray


@runtime_checkable
class PureBit(Protocol):
    def to_bool(self) -> bool: ...


@runtime_checkable
class MaybeBit(Protocol):
    def to_bit(self) -> Optional[bool]: ...


class Bit(enum.Enum):
    """One second of DCF77 signal. The enum value is the display glyph."""

    UNKNOWN = "?"
    SKIPPED = "_"
    ZERO = "0"
    ONE = "1"

    @classmethod
    def from_bool(cls, value: bool) -> "Bit":
        return cls.ONE if value else cls.ZERO

    @property
    def is_value(self) -> bool:
        return self is Bit.ZERO or self is Bit.ONE

    def to_bit(self) -> Optional[bool]:
        if self is Bit.ONE:
            return True
        if self is Bit.ZERO:
            return False
        return None

    def __str__(self) -> str:
        return self.value


BitLike = Union[Bit, bool, np.bool_, int, PureBit, MaybeBit]


def to_bool(b: BitLike) -> bool:
    """Read a pure bit source. Raises ValueError for anything not definite."""
    if isinstance(b, (bool, np.bool_)):
        return bool(b)
    if isinstance(b, (int, np.integer)):
        if b not in (0, 1):
            raise ValueError(f"integer bit must be 0 or 1, got {b}")
        return bool(b)
    if isinstance(b, Bit):
        v = b.to_bit()
        if v is None:
            raise ValueError(f"{b!r} is not a definite bit")
        return v
    if isinstance(b, PureBit):
        return bool(b.to_bool())
    raise TypeError(f"not a pure bit source: {type(b).__name__}")


def to_bit(b: BitLike) -> Optional[bool]:
    """Read a maybe bit source; pure sources are lifted to always-present."""
    if isinstance(b, Bit):
        return b.to_bit()
    if isinstance(b, MaybeBit):
        return b.to_bit()
    return to_bool(b)


def as_bit(b: BitLike) -> Bit:
    """Convert any bit source to a Bit; a missing value becomes UNKNOWN."""
    if isinstance(b, Bit):
        return b
    v = to_bit(b)
    if v is None:
        return Bit.UNKNOWN
    return Bit.from_bool(v)


# ----- fixed-width values exposing their bits (lsb first) -----

def _as_fixed_width(value: Union[int, np.integer]) -> np.integer:
    if isinstance(value, np.integer):
        return value
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("bool is a single bit, not a fixed-width value")
    if isinstance(value, int):
        return np.int32(value)
    raise TypeError(f"not a fixed-width integer: {type(value).__name__}")


def bit_len(value: Union[int, np.integer]) -> int:
    """Declared width of the value in bits."""
    return _as_fixed_width(value).dtype.itemsize * 8


def nth_bit(value: Union[int, np.integer], n: int) -> bool:
    """n-th bit counting from the least significant (0-indexed)."""
    v = _as_fixed_width(value)
    width = v.dtype.itemsize * 8
    if not 0 <= n < width:
        raise IndexError(f"bit index {n} out of range for {width}-bit value")
    return bool((int(v) >> n) & 1)


def to_bit_vector(value: Union[int, np.integer]) -> NDArray[np.bool_]:
    """All bits of a fixed-width value, index 0 = least significant."""
    v = _as_fixed_width(value)
    # explicit little-endian so byte i holds bits 8i..8i+7
    raw = np.array([v], dtype=v.dtype.newbyteorder("<")).view(np.uint8)
    return np.unpackbits(raw, bitorder="little").astype(np.bool_)


# ----- building fixed-width values from bits -----

def _width_of(dtype: DTypeLike) -> int:
    dt = np.dtype(dtype)
    if dt.kind not in "iu":
        raise TypeError(f"dtype must be an integer type, got {dt}")
    return dt.itemsize * 8


def _fold(values: Sequence[bool], dtype: DTypeLike) -> np.integer:
    dt = np.dtype(dtype)
    width = _width_of(dt)
    if len(values) > width:
        raise ValueError(f"{len(values)} bits do not fit into {width}-bit {dt}")
    acc = 0
    for v in values:
        acc = (acc << 1) | (1 if v else 0)
    # reinterpret the top bit as sign for signed types
    if dt.kind == "i" and acc >= 1 << (width - 1):
        acc -= 1 << width
    return dt.type(acc)


def from_bits_iter(bits: Iterable[BitLike], dtype: DTypeLike) -> np.integer:
    """Fold definite bits into an integer, first bit consumed = most significant.

    Raises ValueError if more bits are given than ``dtype`` can hold.
    """
    return _fold([to_bool(b) for b in bits], dtype)


def from_bits_msb(bits: Iterable[BitLike], dtype: DTypeLike) -> np.integer:
    return from_bits_iter(bits, dtype)


def from_bits_lsb(bits: Reversible[BitLike], dtype: DTypeLike) -> np.integer:
    """Same as from_bits_msb but the first bit is the least significant."""
    return from_bits_iter(reversed(bits), dtype)


def from_maybebits_iter(bits: Iterable[BitLike], dtype: DTypeLike) -> Optional[np.integer]:
    """Like from_bits_iter, but returns None if any bit is not definite."""
    values: List[bool] = []
    for b in bits:
        v = to_bit(b)
        if v is None:
            return None
        values.append(v)
    return _fold(values, dtype)


def from_maybebits_msb(bits: Iterable[BitLike], dtype: DTypeLike) -> Optional[np.integer]:
    return from_maybebits_iter(bits, dtype)


def from_maybebits_lsb(bits: Reversible[BitLike], dtype: DTypeLike) -> Optional[np.integer]:
    return from_maybebits_iter(reversed(bits), dtype)


def bits_to_str(bits: Iterable[Bit]) -> str:
    return "".join(str(b) for b in bits)
