"""
chanmorph
缠论形态学：从 K 线序列识别顶/底分型。
"""

from .analysis import PartingShaper, ks_to_pts
from .io import Candle, MergedCandle, Parting

__version__ = "0.1.0"

__all__ = [
    "Candle",
    "MergedCandle",
    "Parting",
    "PartingShaper",
    "ks_to_pts",
]
