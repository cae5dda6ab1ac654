from __future__ import annotations

"""
DCF77 telegram layout and timing constants.

Second       Contents
 0 - 14      weather / civil warning data, ignored
15           R   - call bit (irregularities at the transmitter)
16           A1  - announces a MEZ <> MESZ change at the end of this hour
17 - 18      Z1, Z2 - time zone, read lsb first: 0b10 MEZ, 0b01 MESZ
19           A2  - announces a leap second at the end of this hour
20           S   - start of time code, always 1
21 - 27      minutes, BCD lsb first (4 + 3 bits), 28 even parity
29 - 34      hours, BCD lsb first (4 + 2 bits), 35 even parity
36 - 41      day of month, BCD lsb first (4 + 2 bits)
42 - 44      day of week, 1 = Monday .. 7 = Sunday
45 - 49      month, BCD lsb first (4 + 1 bits)
50 - 57      year within century, BCD lsb first (4 + 4 bits)
58           even parity over 36 - 58
59           no pulse (minute marker), except during a leap second
"""

from dataclasses import dataclass
from datetime import timedelta

FRAME_LENGTH = 60

# Column legend aligned with bit positions 0..59 for debug displays.
DECODE_HEADER = "---------------RADMLS1248124P124812P1248121241248112481248P_"

# Field spans as (start, stop) half-open ranges over the 60-bit frame.
CALL_BIT = 15
DST_ANNOUNCE_BIT = 16
TIMEZONE_BITS = (17, 19)
LEAP_ANNOUNCE_BIT = 19
START_OF_TIME_CODE_BIT = 20

MINUTE_ONES = (21, 25)
MINUTE_TENS = (25, 28)
MINUTE_PARITY_SPAN = (21, 29)

HOUR_ONES = (29, 33)
HOUR_TENS = (33, 35)
HOUR_PARITY_SPAN = (29, 36)

DAY_ONES = (36, 40)
DAY_TENS = (40, 42)
WEEKDAY_BITS = (42, 45)
MONTH_ONES = (45, 49)
MONTH_TENS = (49, 50)
YEAR_ONES = (50, 54)
YEAR_TENS = (54, 58)
DATE_PARITY_SPAN = (36, 59)

SYNC_BIT = 59

YEAR_BASE = 2000

# Timezone selector value (bit17 + 2 * bit18) -> (name, UTC offset)
TIMEZONES = {
    0b10: ("MEZ", timedelta(hours=1)),
    0b01: ("MESZ", timedelta(hours=2)),
}


@dataclass(frozen=True)
class Dcf77Constants:
    frame_length: int = FRAME_LENGTH
    sample_period_s: float = 1.0
    # receiver module sampled by a UART at 50 baud: one sample bit per 20 ms,
    # the start bit eats the first 20 ms of every pulse
    uart_baud: int = 50
    subinterval_ms: int = 20
    # pulses up to 0xF (<= 100 ms) are 0, longer ones (200 ms nominal) are 1
    short_pulse_max: int = 0x0F
