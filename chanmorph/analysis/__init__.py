"""
chanmorph.analysis
分析逻辑层：分型识别与分型标注图。
"""

from .parting import (
    PartingShaper,
    detect_partings,
    ks_to_pts,
    merge_inclusive,
    to_merged_candle,
)
from .plotting import plot_partings

__all__ = [
    # 分型
    "PartingShaper",
    "ks_to_pts",
    "detect_partings",
    "merge_inclusive",
    "to_merged_candle",
    # 可视化
    "plot_partings",
]
