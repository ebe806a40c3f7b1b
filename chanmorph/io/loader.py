"""
io/loader.py
Bridge between tabular candle data (pandas) and the parting shaper.

Usage:
    from chanmorph.io import load_candles

    candles = load_candles("data/raw/000001_1m.csv")
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Iterable

import pandas as pd

from .schema import (
    COL_DATETIME,
    COL_HIGH,
    COL_LOW,
    PARTING_COLUMNS,
    REQUIRED_COLUMNS,
    Candle,
    Parting,
)

logger = logging.getLogger(__name__)


def _read_csv(path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(path, encoding="utf-8")
    except UnicodeDecodeError:
        return pd.read_csv(path, encoding="gbk")


# Readers by file suffix
READERS: dict[str, Callable[[Path], pd.DataFrame]] = {
    ".csv": _read_csv,
    ".xlsx": pd.read_excel,
    ".xls": pd.read_excel,
}

# Alternative column headers seen in exported market data
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    COL_DATETIME: ("datetime", "date", "time", "ts", "timestamp", "日期", "时间"),
    COL_HIGH: ("high", "最高价", "最高价(元)"),
    COL_LOW: ("low", "最低价", "最低价(元)"),
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename recognised column aliases to the standard names.

    Matching is case-insensitive; columns already using the standard name
    are left alone.

    Raises:
        ValueError: if a required column cannot be found
    """
    lookup = {str(col).strip().lower(): col for col in df.columns}
    renames = {}
    for standard, aliases in COLUMN_ALIASES.items():
        if standard in df.columns:
            continue
        for alias in aliases:
            if alias.lower() in lookup:
                renames[lookup[alias.lower()]] = standard
                break

    df = df.rename(columns=renames)
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"缺少必需列: {missing}，当前列: {df.columns.tolist()}")
    return df


def _to_decimal(value, column: str, row) -> Decimal:
    # via str so that 10.2 becomes Decimal("10.2") rather than its binary expansion
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        logger.error(f"无法解析价格: 列 '{column}', 行 {row}, 值 {value!r}")
        raise ValueError(f"无法解析价格: 列 '{column}', 行 {row}, 值 {value!r}") from e


def candles_from_frame(
    df: pd.DataFrame,
    datetime_col: str = COL_DATETIME,
    high_col: str = COL_HIGH,
    low_col: str = COL_LOW,
) -> list[Candle]:
    """
    Convert a DataFrame of bars into Candles.

    Rows keep their order; rows without a high or low are dropped.

    Args:
        df: bar data, one row per candle
        datetime_col: name of the timestamp column
        high_col: name of the high price column
        low_col: name of the low price column

    Returns:
        list of Candle in row order

    Raises:
        ValueError: if any of the named columns is missing or a price is not numeric
    """
    missing = [col for col in (datetime_col, high_col, low_col) if col not in df.columns]
    if missing:
        raise ValueError(f"缺少必需列: {missing}，当前列: {df.columns.tolist()}")

    frame = df[[datetime_col, high_col, low_col]]
    incomplete = frame[[high_col, low_col]].isna().any(axis=1)
    if incomplete.any():
        logger.warning(f"跳过 {int(incomplete.sum())} 根缺少最高价/最低价的 K 线")
        frame = frame[~incomplete]

    timestamps = pd.to_datetime(frame[datetime_col])
    return [
        Candle(
            timestamp=ts.to_pydatetime(),
            high=_to_decimal(high, high_col, row),
            low=_to_decimal(low, low_col, row),
        )
        for row, ts, high, low in zip(frame.index, timestamps, frame[high_col], frame[low_col])
    ]


def load_candles(path: str | Path) -> list[Candle]:
    """
    Load candles from a CSV or Excel file.

    Args:
        path: data file path (.csv, .xlsx, .xls)

    Returns:
        list of Candle in file order

    Raises:
        FileNotFoundError: file does not exist
        ValueError: unsupported file type or missing columns
    """
    path = Path(path)

    if not path.exists():
        logger.error(f"文件不存在: {path}")
        raise FileNotFoundError(f"文件不存在: {path}")

    reader = READERS.get(path.suffix.lower())
    if reader is None:
        logger.error(f"不支持的文件类型: {path.suffix}，可用: {list(READERS.keys())}")
        raise ValueError(f"不支持的文件类型: {path.suffix}，可用: {list(READERS.keys())}")

    logger.info(f"加载数据文件: {path.name}")
    try:
        df = normalize_columns(reader(path))
    except ValueError as e:
        logger.error(f"{path.name}: {e}")
        raise

    candles = candles_from_frame(df)
    logger.info(f"成功加载数据: {len(candles)} 根 K 线")
    return candles


def partings_to_frame(partings: Iterable[Parting]) -> pd.DataFrame:
    """Convert partings into a DataFrame, one row per parting."""
    rows = [p.to_dict() for p in partings]
    if not rows:
        return pd.DataFrame(columns=PARTING_COLUMNS)
    return pd.DataFrame(rows, columns=PARTING_COLUMNS)


def save_partings(partings: Iterable[Parting], path: str | Path) -> Path:
    """Write partings to a CSV file, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = partings_to_frame(partings)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info(f"分型结果已保存至: {path} ({len(df)} rows)")
    return path


def list_readers() -> list[str]:
    """List supported file suffixes."""
    return list(READERS.keys())


def register_reader(suffix: str, reader: Callable[[Path], pd.DataFrame]) -> None:
    """Register a reader for an additional file suffix."""
    READERS[suffix.lower()] = reader
    logger.info(f"已注册读取器: {suffix}")
