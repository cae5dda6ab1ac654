import io
import logging
import sys
from datetime import datetime, timedelta, timezone

from dcf77dec.cli import main
from dcf77dec.constants import DECODE_HEADER
from dcf77dec.receiver import Receiver
from dcf77dec.source import StreamSource, open_source
from dcf77dec.synth import bits_to_pulses, encode_telegram
from dcf77dec.types import ParityError

MEZ = timezone(timedelta(hours=1))


def _minutes(start, n):
    out = b""
    for k in range(n):
        out += bits_to_pulses(encode_telegram(start + timedelta(minutes=k)))
    return out


def test_stream_source_reads_bytes():
    src = StreamSource(io.BytesIO(b"\x0f\xff"))
    assert src.read_sample() == 0x0F
    assert src.read_sample() == 0xFF
    assert src.read_sample() is None


def test_receiver_decodes_each_minute_marker():
    start = datetime(2024, 1, 15, 10, 5, tzinfo=MEZ)
    # start mid-minute: 17 leftover samples before the first full telegram
    raw = bytes([0x0F] * 17) + _minutes(start, 3)
    results = list(Receiver(StreamSource(io.BytesIO(raw))).minutes())
    assert [r.time for r in results] == [start + timedelta(minutes=k) for k in range(3)]
    assert all(r.ok for r in results)
    assert len(results[0].window) == 60


def test_receiver_reports_bad_minute_and_continues():
    start = datetime(2024, 1, 15, 10, 5, tzinfo=MEZ)
    raw = bytearray(_minutes(start, 2))
    raw[22] = 0xFF if raw[22] == 0x0F else 0x0F  # minute bit of the first telegram
    results = list(Receiver(StreamSource(io.BytesIO(bytes(raw)))).minutes())
    assert len(results) == 2
    assert isinstance(results[0].error, ParityError)
    assert results[0].time is None
    assert results[1].time == start + timedelta(minutes=1)


def test_receiver_incomplete_window_yields_nothing():
    raw = bytes([0x0F] * 30 + [0x00])
    assert list(Receiver(StreamSource(io.BytesIO(raw))).minutes()) == []


def test_receiver_max_samples():
    raw = _minutes(datetime(2024, 1, 15, 10, 5, tzinfo=MEZ), 2)
    results = list(Receiver(StreamSource(io.BytesIO(raw))).minutes(max_samples=60))
    assert len(results) == 1


def test_open_source_file(tmp_path):
    p = tmp_path / "capture.bin"
    p.write_bytes(b"\x07")
    src = open_source(p)
    assert src.read_sample() == 0x07
    src.close()


def test_cli_prints_timestamps(tmp_path, capsys):
    start = datetime(2024, 1, 15, 10, 5, tzinfo=MEZ)
    p = tmp_path / "capture.bin"
    p.write_bytes(_minutes(start, 2))
    assert main([str(p)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["2024-01-15T10:05:00+01:00", "2024-01-15T10:06:00+01:00"]


def test_cli_show_window_and_raw(tmp_path, capsys):
    p = tmp_path / "capture.bin"
    p.write_bytes(_minutes(datetime(2024, 7, 1, 12, 0, tzinfo=timezone(timedelta(hours=2))), 1))
    assert main([str(p), "--show-window", "--raw"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "0000001111 0"
    assert len(lines) == 60 + 3
    assert lines[60] == DECODE_HEADER
    assert lines[61].endswith("_") and len(lines[61]) == 60
    assert lines[62] == "2024-07-01T12:00:00+02:00"


def test_cli_missing_file(tmp_path):
    assert main([str(tmp_path / "nope.bin")]) == 1


def test_receiver_debug_log_renders_samples(caplog):
    caplog.set_level(logging.DEBUG, logger="dcf77dec.receiver")
    list(Receiver(StreamSource(io.BytesIO(b"\x0f\xff"))).minutes())
    messages = [r.getMessage() for r in caplog.records if r.name == "dcf77dec.receiver"]
    assert messages == ["sample   0: 0000001111 -> 0 (1/60)", "sample   1: 0011111111 -> 1 (2/60)"]


def test_close_leaves_borrowed_stream_open():
    stream = io.BytesIO(b"\x0f")
    StreamSource(stream, owns_stream=False).close()
    assert not stream.closed
    StreamSource(stream).close()
    assert stream.closed


def test_cli_stdin_is_not_closed(monkeypatch, capsys):
    stdin = io.TextIOWrapper(io.BytesIO(_minutes(datetime(2024, 1, 15, 10, 5, tzinfo=MEZ), 1)))
    monkeypatch.setattr(sys, "stdin", stdin)
    assert main(["-"]) == 0
    assert not stdin.buffer.closed
    assert capsys.readouterr().out.splitlines() == ["2024-01-15T10:05:00+01:00"]
