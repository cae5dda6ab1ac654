import numpy as np
import pytest

from dcf77dec.bitrep import Bit
from dcf77dec.frame import FrameBuffer


def _pattern(n, seed=5):
    rng = np.random.default_rng(seed)
    choices = (Bit.UNKNOWN, Bit.SKIPPED, Bit.ZERO, Bit.ONE)
    return [choices[int(k)] for k in rng.integers(0, 4, size=n)]


def test_fill_to_capacity():
    fb = FrameBuffer()
    assert len(fb) == 0
    assert not fb.is_full()
    bits = _pattern(60)
    for i, b in enumerate(bits):
        fb.append(b)
        assert len(fb) == i + 1
    assert fb.is_full()
    assert fb.snapshot() == tuple(bits)


def test_overflow_drops_oldest():
    fb = FrameBuffer()
    bits = _pattern(60)
    fb.append_many(bits)
    fb.append(Bit.ONE)
    assert len(fb) == 60
    assert fb.is_full()
    assert fb.snapshot() == tuple(bits[1:] + [Bit.ONE])
    assert fb.get(0) == bits[1]
    assert fb.get(59) == Bit.ONE


def test_append_many_longer_than_capacity():
    fb = FrameBuffer()
    bits = _pattern(75, seed=9)
    fb.append_many(bits)
    assert fb.snapshot() == tuple(bits[-60:])


def test_get_out_of_range():
    fb = FrameBuffer()
    fb.append_many(_pattern(60))
    with pytest.raises(IndexError):
        fb.get(60)
    with pytest.raises(IndexError):
        fb.get(-1)
    fb.clear()
    assert len(fb) == 0
    with pytest.raises(IndexError):
        fb.get(0)


def test_add_bits_lsb_first():
    fb = FrameBuffer()
    fb.add_bits(4, 6)
    fb.add_bits(3, np.uint8(1))
    assert str(fb) == "0110100"
    with pytest.raises(ValueError):
        fb.add_bits(9, np.uint8(1))


def test_append_converts_bools_and_renders():
    fb = FrameBuffer(4)
    fb.append_many([True, False, Bit.SKIPPED, Bit.UNKNOWN])
    assert fb.is_full()
    assert str(fb) == "10_?"
    assert "4/4" in repr(fb)
