from __future__ import annotations

import os
import sys
from typing import IO, Iterator, Optional, Protocol, Union


class SampleSource(Protocol):
    """Anything that hands out one raw sample byte per second, None when exhausted."""

    def read_sample(self) -> Optional[int]: ...


class StreamSource:
    """Reads samples one byte at a time from a binary stream.

    The stream may be a capture file or an already configured serial device
    (50 baud, 8N1); line setup is the caller's business.
    """

    def __init__(self, stream: IO[bytes], owns_stream: bool = True):
        self.stream = stream
        self.owns_stream = owns_stream

    def read_sample(self) -> Optional[int]:
        b = self.stream.read(1)
        if not b:
            return None
        return b[0]

    def close(self) -> None:
        """Close the stream, unless it was borrowed (e.g. stdin)."""
        if self.owns_stream:
            self.stream.close()


def open_source(path: Union[str, os.PathLike]) -> StreamSource:
    """Open a capture file or device; ``-`` reads stdin."""
    if str(path) == "-":
        return StreamSource(sys.stdin.buffer, owns_stream=False)
    return StreamSource(open(path, "rb", buffering=0))


def iter_samples(source: SampleSource) -> Iterator[int]:
    while True:
        s = source.read_sample()
        if s is None:
            return
        yield s
