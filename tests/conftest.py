#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
测试公共夹具
"""

import numpy as np
import pytest

from livewire import LiveWireEngine
from livewire.config import LiveWireConfig


@pytest.fixture
def make_engine():
    """用二维强度数组创建已加载栅格的引擎"""
    def _Make(data: np.ndarray, mask=None, config: LiveWireConfig = None) -> LiveWireEngine:
        engine = LiveWireEngine(config)
        height, width = data.shape
        engine.LoadRaster(width, height, data.ravel(), mask)
        return engine
    return _Make


@pytest.fixture
def uniform5():
    """5x5 均匀强度栅格"""
    return np.full((5, 5), 7.0)


@pytest.fixture
def diagonal5():
    """5x5 平坦背景上 (0,0)->(4,4) 的一条亮对角线"""
    data = np.zeros((5, 5))
    for i in range(5):
        data[i, i] = 255.0
    return data


@pytest.fixture
def random_raster():
    """固定随机种子的小栅格"""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(7, 6)).astype(np.float64)
