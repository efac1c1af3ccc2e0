#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
live-wire 批处理描边脚本
从图像文件读取灰度数据，按给定的种子和锚点描边，输出折线 JSON
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from .common.exceptions import LiveWireError
from .config import LiveWireConfig, load_config
from .engine import LiveWireEngine
from .utils.logger import SetupLogger


def ParsePoint(text: str) -> Tuple[int, int]:
    """解析 "x,y" 格式的像素坐标"""
    try:
        x, y = (int(v) for v in text.split(','))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"坐标格式应为 x,y: {text}") from e
    return (x, y)


def ParseArgs(argv: Optional[List[str]] = None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="live-wire 边界描绘",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法：
  # 从 (12,30) 出发，依次锚定两个点后闭合回起点
  livewire-trace slice.png --seed 12,30 --point 40,42 --point 25,60 --point 13,31 --close \\
    --output outputs/contour.json
        """
    )

    parser.add_argument("image", type=str, help="输入图像路径（按灰度读取）")
    parser.add_argument("--seed", type=ParsePoint, required=True,
                        help="首个种子点（格式: x,y）")
    parser.add_argument("--point", type=ParsePoint, action="append", default=[],
                        help="依次锚定的点（可重复，格式: x,y）")
    parser.add_argument("--close", action="store_true",
                        help="最后一个点在首个种子容差内时闭合描边")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML配置文件路径（默认使用内置默认值）")
    parser.add_argument("--output", type=str, default=None,
                        help="输出JSON路径（默认输出到标准输出）")
    parser.add_argument("--log-level", type=str, default=None,
                        help="日志级别（覆盖配置文件）")

    return parser.parse_args(argv)


def LoadImage(img_path: str) -> np.ndarray:
    """按灰度加载图像"""
    img = cv2.imread(img_path, cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ValueError(f"无法读取图像: {img_path}")
    return img


def Trace(engine: LiveWireEngine, seed: Tuple[int, int], points: List[Tuple[int, int]], close: bool) -> dict:
    """
    执行一次完整描边

    除最后一个点外的每个点都作为锚点；close 为真时最后一个点按点击语义处理，
    落在首个种子容差内即闭合。
    """
    session = engine.Seed(seed)
    if not points:
        return session.Close(seed).ToDict()

    for point in points[:-1]:
        session.Anchor(point)

    last = points[-1]
    if close:
        result = session.Click(last)
        if result is None:
            result = session.Close()
    else:
        result = session.Close(last)
    return result.ToDict()


def Main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = ParseArgs(argv)

    try:
        config = load_config(Path(args.config)) if args.config else LiveWireConfig()
    except LiveWireError as e:
        print(f"配置加载失败: {e}", file=sys.stderr)
        return 1

    SetupLogger(level=args.log_level or config.logging.level, log_dir=config.logging.log_dir)

    try:
        image = LoadImage(args.image)
    except ValueError as e:
        logger.error(str(e))
        return 1

    engine = LiveWireEngine(config)
    try:
        engine.LoadImage(image)
        result = Trace(engine, args.seed, args.point, args.close)
    except LiveWireError as e:
        logger.error(f"描边失败: {e}")
        return 1

    text = json.dumps(result, ensure_ascii=False)
    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding='utf-8')
        logger.info(f"结果已保存: {out_path}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(Main())
