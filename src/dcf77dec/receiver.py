from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Optional

from .bitrep import Bit
from .decoder import Decoder
from .pulse import format_sample
from .source import SampleSource, iter_samples
from .types import DecodingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MinuteResult:
    window: str
    time: Optional[datetime] = None
    error: Optional[DecodingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Receiver:
    """Drains a sample source into a Decoder, one decode per minute marker.

    A decode is attempted whenever a no-pulse second arrives while the window
    is full. Failures are logged and reported, never retried; the next minute
    is decoded on its own.
    """

    def __init__(
        self,
        source: SampleSource,
        decoder: Optional[Decoder] = None,
        on_sample: Optional[Callable[[int, Bit], None]] = None,
    ):
        self.source = source
        self.decoder = decoder if decoder is not None else Decoder()
        self.on_sample = on_sample

    def minutes(self, max_samples: Optional[int] = None) -> Iterator[MinuteResult]:
        for n, sample in enumerate(iter_samples(self.source)):
            if max_samples is not None and n >= max_samples:
                return
            bit = self.decoder.append(sample)
            logger.debug("sample %3d: %s -> %s (%d/60)", n, format_sample(sample), bit, len(self.decoder))
            if self.on_sample is not None:
                self.on_sample(sample, bit)
            if bit is Bit.SKIPPED and self.decoder.is_full():
                yield self._attempt()

    def _attempt(self) -> MinuteResult:
        window = str(self.decoder)
        try:
            t = self.decoder.decode()
        except DecodingError as e:
            logger.warning("decode failed (%s): %s", type(e).__name__, e)
            return MinuteResult(window=window, error=e)
        logger.info("decoded %s", t.isoformat())
        return MinuteResult(window=window, time=t)
