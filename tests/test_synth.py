from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from dcf77dec.bitrep import Bit
from dcf77dec.decoder import decode_telegram
from dcf77dec.pulse import decode_pulses
from dcf77dec.synth import bits_to_pulses, encode_telegram

MEZ = timezone(timedelta(hours=1))
MESZ = timezone(timedelta(hours=2))


def test_encode_known_layout():
    # 2024-01-15 10:05 MEZ, bits 15..58 written out by hand
    bits = encode_telegram(datetime(2024, 1, 15, 10, 5, tzinfo=MEZ))
    s = "".join(str(b) for b in bits)
    assert s[:15] == "0" * 15
    assert s[15:21] == "000101"
    assert s[21:29] == "10100000"
    assert s[29:36] == "0000101"
    assert s[36:59] == "10101010010000001001001"
    assert s[59] == "_"


def test_encode_decode_agree_on_random_times():
    rng = np.random.default_rng(2024)
    start = datetime(2000, 1, 1, tzinfo=MEZ)
    for _ in range(100):
        tz = MEZ if rng.integers(0, 2) else MESZ
        t = (start + timedelta(minutes=int(rng.integers(0, 99 * 365 * 24 * 60)))).replace(tzinfo=tz)
        tg = decode_telegram(encode_telegram(t))
        assert tg.to_datetime() == t
        assert tg.weekday == t.isoweekday()


def test_encode_flags():
    t = datetime(2024, 3, 31, 1, 59, tzinfo=MEZ)
    tg = decode_telegram(encode_telegram(t, call_bit=True, dst_announcement=True, leap_second_announcement=True))
    assert tg.call_bit and tg.dst_announcement and tg.leap_second_announcement


def test_encode_rejects_foreign_offsets():
    with pytest.raises(ValueError):
        encode_telegram(datetime(2024, 1, 1, tzinfo=timezone.utc))
    with pytest.raises(ValueError):
        encode_telegram(datetime(2024, 1, 1))
    with pytest.raises(ValueError):
        encode_telegram(datetime(2100, 1, 1, tzinfo=MEZ))


def test_pulses_decode_back():
    bits = [Bit.ZERO, Bit.ONE, Bit.SKIPPED, Bit.UNKNOWN]
    raw = bits_to_pulses(bits)
    assert isinstance(raw, bytes)
    assert decode_pulses(raw) == bits
