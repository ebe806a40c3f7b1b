"""
run_pipeline.py
分型识别流水线入口脚本。

流程:
1. 加载数据  - 读取 CSV / Excel 中的 K 线
2. 分型识别  - 处理包含关系并识别顶/底分型
3. 输出结果  - 保存分型 CSV，可选绘制分型标注图

用法:
    python run_pipeline.py data/raw/000001_1m.csv
    python run_pipeline.py data/raw/000001_1m.csv --config config.yaml --plot output/partings.png

输出文件:
    - <output_dir>/<name>_partings.csv  (分型列表)
    - 可选 PNG 图表
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

from chanmorph.analysis import ks_to_pts, plot_partings
from chanmorph.config import AppConfig
from chanmorph.io import COL_DATETIME, COL_HIGH, COL_LOW, load_candles, save_partings
from chanmorph.logging import configure_from_config

logger = logging.getLogger("run_pipeline")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="K 线分型识别 (Chan Theory)")
    parser.add_argument("input_file", help="K 线数据文件 (.csv / .xlsx / .xls)")
    parser.add_argument("--config", default=None, help="YAML 配置文件路径")
    parser.add_argument("--output", default=None, help="分型 CSV 输出路径")
    parser.add_argument("--plot", default=None, help="分型标注图 PNG 输出路径")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    try:
        if args.config:
            config = AppConfig.from_yaml(args.config)
        else:
            config = AppConfig.from_yaml_or_default()
    except (FileNotFoundError, ValueError) as e:
        print(f"配置加载失败: {e}", file=sys.stderr)
        return 1

    configure_from_config(config)

    input_path = Path(args.input_file)
    output_path = (
        Path(args.output)
        if args.output
        else Path(config.output_dir) / f"{input_path.stem}_partings.csv"
    )

    logger.info(f"[Step 1/3] 加载数据: {input_path}")
    try:
        candles = load_candles(input_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"数据加载失败: {e}")
        return 1

    if not candles:
        logger.warning("没有可用的 K 线")
    else:
        logger.info(f"  日期范围: {candles[0].timestamp} ~ {candles[-1].timestamp}")

    logger.info("[Step 2/3] 识别分型...")
    partings = ks_to_pts(candles, config.parting)
    tops = sum(1 for p in partings if p.is_top)
    logger.info(f"  分型数量: {len(partings)} (顶 {tops}, 底 {len(partings) - tops})")

    logger.info("[Step 3/3] 保存结果...")
    save_partings(partings, output_path)

    if args.plot:
        df = pd.DataFrame(
            {
                COL_DATETIME: [k.timestamp for k in candles],
                COL_HIGH: [k.high for k in candles],
                COL_LOW: [k.low for k in candles],
            }
        )
        plot_partings(df, partings, save_path=args.plot, config=config.chart)

    logger.info("流水线完成")
    return 0


if __name__ == "__main__":
    sys.exit(main())
