"""
analysis/parting.py
分型识别模块。

逐根消费 K 线：先按当前走势方向处理相邻 K 线的包含关系，再在合并后的
三根 K 线上判断顶/底分型。整个过程只需一次遍历，已输出的分型不会被修改。
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import pandas as pd

from ..config import PartingConfig
from ..io.loader import candles_from_frame, partings_to_frame
from ..io.schema import COL_DATETIME, COL_HIGH, COL_LOW, Candle, MergedCandle, Parting

logger = logging.getLogger(__name__)


def to_merged_candle(k: Candle) -> MergedCandle:
    """Wrap a single candle as a merged candle of count 1."""
    return MergedCandle(
        start_ts=k.timestamp,
        end_ts=k.timestamp,
        extremum_ts=k.timestamp,
        high=k.high,
        low=k.low,
        count=1,
    )


def merge_inclusive(current: MergedCandle, k: Candle, upward: bool) -> Optional[MergedCandle]:
    """
    Merge ``k`` into ``current`` when one range contains the other.

    Equal bounds count as containment. Under an upward trend both bounds take
    the larger value, under a downward trend the smaller one.

    Args:
        current: the merged candle already in the window
        k: the incoming candle
        upward: active trend direction

    Returns:
        the merged candle, or None when the two ranges are independent
    """
    if current.high >= k.high and current.low <= k.low:
        extremum_ts = current.extremum_ts
    elif k.high >= current.high and k.low <= current.low:
        extremum_ts = k.timestamp
    else:
        return None

    if upward:
        high, low = max(current.high, k.high), max(current.low, k.low)
    else:
        high, low = min(current.high, k.high), min(current.low, k.low)

    return MergedCandle(
        start_ts=current.start_ts,
        end_ts=k.timestamp,
        extremum_ts=extremum_ts,
        high=high,
        low=low,
        count=current.count + 1,
    )


def _turns(k: Candle, ck: MergedCandle, upward: bool) -> bool:
    # 上升中出现更低的低点，或下降中出现更高的高点
    return (upward and k.low < ck.low) or (not upward and k.high > ck.high)


class PartingShaper:
    """
    Streaming parting detector.

    Holds a window of at most three merged candles (oldest first) and the
    current trend direction. Feed candles in timestamp order with
    ``consume``/``feed``, then call ``finish`` once the stream ends.

    Example:
        shaper = PartingShaper()
        shaper.feed(candles)
        shaper.finish()
        partings = shaper.partings
    """

    def __init__(self, config: Optional[PartingConfig] = None):
        self.config = config or PartingConfig()
        self._window: tuple[MergedCandle, ...] = ()
        self._upward = True
        self._partings: list[Parting] = []

    @property
    def window(self) -> tuple[MergedCandle, ...]:
        """Live merged candles, oldest first (0 to 3 of them)."""
        return self._window

    @property
    def upward(self) -> bool:
        return self._upward

    @property
    def partings(self) -> tuple[Parting, ...]:
        """Every parting emitted so far, in order."""
        return tuple(self._partings)

    def _merge(self, ck: MergedCandle, k: Candle) -> Optional[MergedCandle]:
        if not self.config.merge_inclusive:
            return None
        return merge_inclusive(ck, k, self._upward)

    def _emit(self) -> Parting:
        k1, k2, k3 = self._window
        parting = Parting(
            start_ts=k1.start_ts,
            end_ts=k3.end_ts,
            extremum_ts=k2.extremum_ts,
            extremum_price=k2.low if self._upward else k2.high,
            count=k1.count + k2.count + k3.count,
            is_top=not self._upward,
        )
        self._partings.append(parting)
        logger.debug(
            f"{parting.kind} parting at {parting.extremum_ts} "
            f"price={parting.extremum_price} span={parting.start_ts}~{parting.end_ts}"
        )
        return parting

    def consume(self, k: Candle) -> Optional[Parting]:
        """
        Process one candle.

        Returns:
            the parting completed by this candle, if any
        """
        size = len(self._window)

        if size == 0:
            self._window = (to_merged_candle(k),)
            return None

        if size == 1:
            (k1,) = self._window
            merged = self._merge(k1, k)
            if merged is not None:
                self._window = (merged,)
                return None
            # 第一次突破决定初始方向
            self._upward = k.high > k1.high
            self._window = (k1, to_merged_candle(k))
            return None

        if size == 2:
            k1, k2 = self._window
            merged = self._merge(k2, k)
            if merged is not None:
                self._window = (k1, merged)
                return None
            if _turns(k, k2, self._upward):
                # 形成顶/底分型候选，走势反转
                self._window = (k1, k2, to_merged_candle(k))
                self._upward = not self._upward
                return None
            # 未形成分型，左移一位
            self._window = (k2, to_merged_candle(k))
            return None

        k1, k2, k3 = self._window
        merged = self._merge(k3, k)
        if merged is not None:
            self._window = (k1, k2, merged)
            return None

        parting = self._emit()

        if _turns(k, k3, self._upward):
            # k2, k3, k 紧接着构成下一个分型，左移一位
            self._window = (k2, k3, to_merged_candle(k))
            self._upward = not self._upward
        else:
            # 左移两位
            self._upward = k.high > k3.high
            self._window = (k3, to_merged_candle(k))
        return parting

    def feed(self, ks: Iterable[Candle]) -> list[Parting]:
        """Consume candles in order; return the partings they completed."""
        emitted = []
        for k in ks:
            parting = self.consume(k)
            if parting is not None:
                emitted.append(parting)
        return emitted

    def finish(self) -> Optional[Parting]:
        """
        Flush at end of stream.

        Three merged candles still in the window already form a parting. It
        is emitted, and the last two candles stay in the window so the stream
        can be continued.
        """
        if len(self._window) < 3:
            return None
        parting = self._emit()
        self._window = self._window[1:]
        return parting


def ks_to_pts(ks: Iterable[Candle], config: Optional[PartingConfig] = None) -> list[Parting]:
    """
    Detect partings in an ordered candle sequence.

    Timestamps must be unique and increasing; this is not re-checked.

    Args:
        ks: candles in timestamp order
        config: detection parameters (defaults to PartingConfig())

    Returns:
        partings in start_ts order
    """
    shaper = PartingShaper(config)
    shaper.feed(ks)
    shaper.finish()

    partings = list(shaper.partings)
    tops = sum(1 for p in partings if p.is_top)
    logger.debug(f"Detected {len(partings)} partings ({tops} tops, {len(partings) - tops} bottoms)")
    return partings


def detect_partings(
    df: pd.DataFrame,
    config: Optional[PartingConfig] = None,
    datetime_col: str = COL_DATETIME,
    high_col: str = COL_HIGH,
    low_col: str = COL_LOW,
) -> pd.DataFrame:
    """
    Detect partings in a DataFrame of bars.

    Args:
        df: bar data in timestamp order
        config: detection parameters
        datetime_col: name of the timestamp column
        high_col: name of the high price column
        low_col: name of the low price column

    Returns:
        DataFrame with one row per parting and columns:
            - start_ts, end_ts: span of the three merged candles
            - extremum_ts: timestamp of the middle candle's extremum
            - extremum_price: Decimal
            - count: number of raw candles in the span
            - is_top: bool
    """
    candles = candles_from_frame(df, datetime_col=datetime_col, high_col=high_col, low_col=low_col)
    return partings_to_frame(ks_to_pts(candles, config))
