"""
io/schema.py
Value types shared by the loader and the parting shaper.

Prices are ``decimal.Decimal`` so that inclusion and extremum comparisons are
exact. Every type is frozen: a merge produces a new MergedCandle rather than
changing the old one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

# Standard column names
COL_DATETIME = "datetime"
COL_OPEN = "open"
COL_HIGH = "high"
COL_LOW = "low"
COL_CLOSE = "close"

REQUIRED_COLUMNS = [COL_DATETIME, COL_HIGH, COL_LOW]

PARTING_COLUMNS = ["start_ts", "end_ts", "extremum_ts", "extremum_price", "count", "is_top"]


@dataclass(frozen=True)
class Candle:
    """One raw K-line observation."""

    timestamp: datetime
    high: Decimal
    low: Decimal


@dataclass(frozen=True)
class MergedCandle:
    """
    One or more consecutive candles folded together by inclusion.

    Attributes:
        start_ts: timestamp of the first constituent candle
        end_ts: timestamp of the last constituent candle
        extremum_ts: timestamp of the constituent whose range dominates
        high: merged high
        low: merged low
        count: number of raw candles merged (>= 1)
    """

    start_ts: datetime
    end_ts: datetime
    extremum_ts: datetime
    high: Decimal
    low: Decimal
    count: int = 1


@dataclass(frozen=True)
class Parting:
    """
    A top or bottom fractal spanning three merged candles.

    ``extremum_price`` is the middle candle's high for a top and its low for
    a bottom; ``count`` is the number of raw candles in the three.
    """

    start_ts: datetime
    end_ts: datetime
    extremum_ts: datetime
    extremum_price: Decimal
    count: int
    is_top: bool

    @property
    def kind(self) -> str:
        return "TOP" if self.is_top else "BOTTOM"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
