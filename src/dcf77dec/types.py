from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple


class ParityGroup(enum.Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DATE = "date"


class DecodingError(ValueError):
    """Base class for every reason a 60-bit window does not decode."""


class NotEnoughBitsError(DecodingError):
    pass


class MissingBitError(DecodingError):
    """A field that must be definite contains an UNKNOWN or SKIPPED bit."""

    def __init__(self, span: Tuple[int, int]):
        self.span = span
        super().__init__(f"non-definite bit in positions {span[0]}..{span[1] - 1}")


class ParityError(DecodingError):
    def __init__(self, group: ParityGroup):
        self.group = group
        super().__init__(f"{group.value} parity check failed")


class MissingStartOfTimeCodeError(DecodingError):
    pass


class NotSyncError(DecodingError):
    pass


class InvalidTimezoneBitsError(DecodingError):
    def __init__(self, code: int):
        self.code = code
        super().__init__(f"invalid timezone bits {code:02b}")


class BCDNotBigEnoughError(DecodingError):
    pass


class InvalidDateTimeError(DecodingError):
    """Decoded fields do not form a valid date/time; __cause__ holds the datetime error."""


@dataclass(frozen=True)
class Telegram:
    minute: int
    hour: int
    day: int
    month: int
    year: int
    tz_name: str
    utc_offset: timedelta
    weekday: Optional[int] = None
    call_bit: Optional[bool] = None
    dst_announcement: Optional[bool] = None
    leap_second_announcement: Optional[bool] = None

    def to_datetime(self) -> datetime:
        tz = timezone(self.utc_offset, self.tz_name)
        try:
            return datetime(self.year, self.month, self.day, self.hour, self.minute, 0, tzinfo=tz)
        except ValueError as e:
            raise InvalidDateTimeError(str(e)) from e
