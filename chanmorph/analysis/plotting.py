"""
analysis/plotting.py
分型标注图 (matplotlib)。

K 线按索引等距排列，顶分型标在最高价上方，底分型标在最低价下方，
相邻分型之间用直线相连。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from ..config import ChartConfig
from ..io.loader import normalize_columns
from ..io.schema import COL_CLOSE, COL_DATETIME, COL_HIGH, COL_LOW, COL_OPEN, Parting

logger = logging.getLogger(__name__)


def plot_partings(
    df: pd.DataFrame,
    partings: Sequence[Parting],
    save_path: Optional[str | Path] = None,
    config: Optional[ChartConfig] = None,
    title: str = "Parting Identification (Chan Theory)",
) -> Figure:
    """
    Draw candles with their detected partings.

    Open/close bodies are drawn only when the frame has open and close
    columns; otherwise each bar is a plain high-low line.

    Args:
        df: bar data with datetime/high/low columns
        partings: partings detected on the same data
        save_path: PNG destination; the figure is closed after saving
        config: chart settings
        title: chart title

    Returns:
        the matplotlib Figure
    """
    config = config or ChartConfig()
    df = normalize_columns(df)
    if len(df) > config.max_bars:
        df = df.iloc[-config.max_bars :]
    df = df.reset_index(drop=True)

    dates = pd.to_datetime(df[COL_DATETIME])
    highs = df[COL_HIGH].astype(float)
    lows = df[COL_LOW].astype(float)
    x = np.arange(len(df))
    position = {ts.to_pydatetime(): i for i, ts in enumerate(dates)}

    fig, ax = plt.subplots(figsize=(config.width, config.height))

    ax.vlines(x, lows, highs, color="black", linewidth=0.8)
    if COL_OPEN in df.columns and COL_CLOSE in df.columns:
        opens = df[COL_OPEN].astype(float)
        closes = df[COL_CLOSE].astype(float)
        up = (closes >= opens).to_numpy()
        ax.bar(x[up], (closes - opens)[up], 0.6, bottom=opens[up], color="red")
        ax.bar(x[~up], (opens - closes)[~up], 0.6, bottom=closes[~up], color="green")

    points = []
    for p in partings:
        i = position.get(p.extremum_ts)
        if i is None:
            continue
        price = float(p.extremum_price)
        points.append((i, price))
        if p.is_top:
            ax.scatter(i, price, marker="v", color=config.top_color, zorder=3)
            ax.annotate(f"T {price:.2f}", xy=(i, price), xytext=(i + 0.3, price),
                        va="bottom", fontsize=8, color=config.top_color)
        else:
            ax.scatter(i, price, marker="^", color=config.bottom_color, zorder=3)
            ax.annotate(f"B {price:.2f}", xy=(i, price), xytext=(i + 0.3, price),
                        va="top", fontsize=8, color=config.bottom_color)

    if len(points) >= 2:
        xs, ys = zip(*points)
        ax.plot(xs, ys, color=config.line_color, linewidth=1.2, alpha=0.8)

    step = max(1, len(df) // 20)
    ax.set_xticks(x[::step])
    ax.set_xticklabels([d.strftime("%Y-%m-%d %H:%M") for d in dates[::step]], rotation=45, fontsize=8)

    if len(df):
        y_min, y_max = lows.min(), highs.max()
        y_margin = (y_max - y_min) * 0.05 or 1.0
        ax.set_ylim(y_min - y_margin, y_max + y_margin)

    ax.set_title(title, fontsize=14)
    ax.set_ylabel("Price")
    fig.tight_layout()

    logger.debug(f"Plotted {len(df)} bars and {len(points)} partings")

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=config.dpi, bbox_inches="tight")
        plt.close(fig)
        logger.info(f"图表已保存至: {save_path}")

    return fig
