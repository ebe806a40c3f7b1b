"""
chanmorph.io
Data layer: value types for candles and partings, and the pandas bridge.
"""

from .loader import (
    candles_from_frame,
    list_readers,
    load_candles,
    normalize_columns,
    partings_to_frame,
    register_reader,
    save_partings,
)
from .schema import (
    COL_CLOSE,
    COL_DATETIME,
    COL_HIGH,
    COL_LOW,
    COL_OPEN,
    PARTING_COLUMNS,
    REQUIRED_COLUMNS,
    Candle,
    MergedCandle,
    Parting,
)

__all__ = [
    "Candle",
    "MergedCandle",
    "Parting",
    "COL_DATETIME",
    "COL_OPEN",
    "COL_HIGH",
    "COL_LOW",
    "COL_CLOSE",
    "REQUIRED_COLUMNS",
    "PARTING_COLUMNS",
    "candles_from_frame",
    "normalize_columns",
    "load_candles",
    "partings_to_frame",
    "save_partings",
    "list_readers",
    "register_reader",
]
