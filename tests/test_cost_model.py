#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
链接代价模型测试
"""

import math

import numpy as np
import pytest

from livewire.common.constants import DIRECTIONS_8WAY
from livewire.common.exceptions import OutOfBoundsError
from livewire.config import CostConfig
from livewire.core import CostModel, FeatureWeights, Raster, Trainer, compute_features


def _Model(data, mask=None, weights=None):
    height, width = data.shape
    features = compute_features(Raster.FromBuffer(width, height, data.ravel(), mask))
    return CostModel(features, weights or FeatureWeights.Neutral(CostConfig()))


def test_uniform_raster_has_equal_link_costs(uniform5):
    """均匀栅格上所有栅格内链接代价相同"""
    model = _Model(uniform5)
    expected = 0.43 + 0.43 + 0.14 * 2.0 / 3.0

    for y in range(5):
        for x in range(5):
            for neighbor, cost in model.Neighbors((x, y)):
                assert cost == pytest.approx(expected)


def test_link_cost_is_cached(random_raster):
    """链接代价只计算一次，之后特征变化也不影响已缓存值"""
    model = _Model(random_raster)
    assert model.CachedLinkCount == 0

    first = model.LinkCost((2, 2), 1)
    model.features_.gradient_cost[3, 3] = 0.123
    second = model.LinkCost((2, 2), 1)

    assert first == second
    assert model.CachedLinkCount == 1


def test_out_of_bounds_and_blocked_links_are_infinite():
    """越界邻居或不可通行像素的链接代价为 inf"""
    data = np.full((4, 4), 10.0)
    mask = np.ones((4, 4), dtype=bool)
    mask[1, 1] = False
    model = _Model(data, mask)

    # (0,0) 向 (-1,0) 方向
    assert model.LinkCost((0, 0), 4) == math.inf
    # (0,0) -> (1,1)
    assert model.LinkCost((0, 0), 1) == math.inf
    # (1,1) 自身不可通行
    assert model.LinkCost((1, 1), 0) == math.inf
    assert math.isfinite(model.LinkCost((2, 2), 0))


def test_costs_stay_in_unit_range(random_raster):
    """训练后的链接代价全部落在 [0,1]"""
    height, width = random_raster.shape
    features = compute_features(Raster.FromBuffer(width, height, random_raster.ravel()))
    weights = Trainer().Train((3, 3), features)
    assert weights.trained

    model = CostModel(features, weights)
    for y in range(height):
        for x in range(width):
            for _, cost in model.Neighbors((x, y)):
                assert 0.0 <= cost <= 1.0


def test_neighbors_skip_out_of_bounds(uniform5):
    """角点只有3个邻居"""
    model = _Model(uniform5)
    neighbors = [pixel for pixel, _ in model.Neighbors((0, 0))]
    assert sorted(neighbors) == [(0, 1), (1, 0), (1, 1)]
    assert len(list(model.Neighbors((2, 2)))) == len(DIRECTIONS_8WAY)


def test_link_cost_rejects_out_of_bounds_start(uniform5):
    """起点越界时抛出 OutOfBoundsError，且不写入缓存"""
    model = _Model(uniform5)
    with pytest.raises(OutOfBoundsError):
        model.LinkCost((-1, 0), 0)
    with pytest.raises(OutOfBoundsError):
        model.LinkCost((0, 5), 2)
    assert model.CachedLinkCount == 0
