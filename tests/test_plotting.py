"""
Tests for the parting chart.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from chanmorph.analysis import detect_partings, ks_to_pts, plot_partings
from chanmorph.config import ChartConfig
from chanmorph.io import candles_from_frame


@pytest.fixture
def zigzag_bars() -> pd.DataFrame:
    prices = [10, 11, 12, 11, 10, 11, 12, 13, 12, 11, 10, 11]
    return pd.DataFrame(
        {
            "datetime": pd.date_range("2024-01-02 09:30", periods=len(prices), freq="min"),
            "open": [p + 0.1 for p in prices],
            "high": [p + 0.5 for p in prices],
            "low": [float(p) for p in prices],
            "close": [p + 0.4 for p in prices],
        }
    )


def test_plot_partings_saves_png(tmp_path: Path, zigzag_bars: pd.DataFrame) -> None:
    """The chart is written to the requested path."""
    partings = ks_to_pts(candles_from_frame(zigzag_bars))
    save_path = tmp_path / "charts" / "partings.png"

    fig = plot_partings(zigzag_bars, partings, save_path=save_path)

    assert save_path.exists()
    assert save_path.stat().st_size > 0
    assert fig is not None


def test_plot_partings_marks_each_parting(zigzag_bars: pd.DataFrame) -> None:
    """One annotation per parting inside the drawn range."""
    partings = ks_to_pts(candles_from_frame(zigzag_bars))

    fig = plot_partings(zigzag_bars, partings)
    try:
        ax = fig.axes[0]
        labels = [t.get_text() for t in ax.texts]
        assert len(labels) == len(partings)
        assert sum(label.startswith("T ") for label in labels) == sum(p.is_top for p in partings)
    finally:
        plt.close(fig)


def test_plot_partings_limits_bars(zigzag_bars: pd.DataFrame) -> None:
    """Partings outside the most recent max_bars are skipped."""
    bars = pd.concat([zigzag_bars] * 2, ignore_index=True)
    bars["datetime"] = pd.date_range("2024-01-02 09:30", periods=len(bars), freq="min")
    partings = ks_to_pts(candles_from_frame(bars))

    fig = plot_partings(bars, partings, config=ChartConfig(max_bars=12))
    try:
        ax = fig.axes[0]
        assert len(ax.texts) < len(partings)
    finally:
        plt.close(fig)


def test_plot_partings_without_open_close(zigzag_bars: pd.DataFrame) -> None:
    """High/low only data is drawn as plain bars."""
    bars = zigzag_bars[["datetime", "high", "low"]]
    frame = detect_partings(bars)
    assert len(frame) > 0

    fig = plot_partings(bars, ks_to_pts(candles_from_frame(bars)))
    try:
        assert len(fig.axes[0].patches) == 0
    finally:
        plt.close(fig)
