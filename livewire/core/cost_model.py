#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
链接代价模型：组合静态特征与训练得到的动态代价

cost = static_weight * static + dynamic_weight * dynamic，裁剪到 [0,1]。
每条有向链接首次请求时计算并缓存，会话期间不再重算。
"""

import math
from typing import Iterator, Tuple

import numpy as np

from ..common.constants import DIRECTIONS_8WAY, DIRECTION_COST_SCALE
from ..common.exceptions import OutOfBoundsError
from .models import FeatureField, FeatureWeights, Pixel


class CostModel:
    """
    8邻接有向链接代价

    示例:
        ```python
        model = CostModel(features, weights)
        cost = model.LinkCost((10, 10), direction=1)
        ```
    """

    def __init__(self, features: FeatureField, weights: FeatureWeights):
        self.features_ = features
        self.weights_ = weights
        self.height_, self.width_ = features.shape

        total = weights.laplace + weights.gradient + weights.direction
        if total <= 0:
            raise ValueError("静态特征权重之和必须大于0")
        self.static_norm_ = total

        # NaN 表示尚未计算
        self.cache_ = np.full((len(DIRECTIONS_8WAY), self.height_, self.width_), np.nan)

    @property
    def weights(self) -> FeatureWeights:
        return self.weights_

    @property
    def width(self) -> int:
        return self.width_

    @property
    def height(self) -> int:
        return self.height_

    @property
    def CachedLinkCount(self) -> int:
        """已缓存的链接数"""
        return int(np.count_nonzero(~np.isnan(self.cache_)))

    def LinkCost(self, pixel: Pixel, direction: int) -> float:
        """
        像素到某个邻居方向的链接代价

        Args:
            pixel: 起点像素 (x, y)
            direction: DIRECTIONS_8WAY 下标

        Returns:
            [0,1] 内的代价；邻居越界或任一端不可通行时为 inf

        Raises:
            OutOfBoundsError: 起点像素超出栅格范围
        """
        x, y = pixel
        if x < 0 or x >= self.width_ or y < 0 or y >= self.height_:
            raise OutOfBoundsError(f"链接起点超出栅格范围: {pixel}, size=({self.width_}, {self.height_})")
        cached = self.cache_[direction, y, x]
        if not math.isnan(cached):
            return float(cached)

        cost = self._ComputeLinkCost(x, y, direction)
        self.cache_[direction, y, x] = cost
        return cost

    def Neighbors(self, pixel: Pixel) -> Iterator[Tuple[Pixel, float]]:
        """遍历栅格内的8邻居及对应链接代价"""
        x, y = pixel
        for direction, (dx, dy) in enumerate(DIRECTIONS_8WAY):
            nx, ny = x + dx, y + dy
            if nx < 0 or nx >= self.width_ or ny < 0 or ny >= self.height_:
                continue
            yield (nx, ny), self.LinkCost(pixel, direction)

    def _ComputeLinkCost(self, x: int, y: int, direction: int) -> float:
        dx, dy = DIRECTIONS_8WAY[direction]
        qx, qy = x + dx, y + dy
        if qx < 0 or qx >= self.width_ or qy < 0 or qy >= self.height_:
            return math.inf

        features = self.features_
        if features.blocked[y, x] or features.blocked[qy, qx]:
            return math.inf

        weights = self.weights_
        static = (
            weights.laplace * features.laplace_cost[qy, qx]
            + weights.gradient * features.gradient_cost[qy, qx]
            + weights.direction * self._DirectionCost(x, y, qx, qy)
        ) / self.static_norm_

        cost = weights.static_weight * static
        if weights.trained and weights.dynamic_weight > 0:
            cost += weights.dynamic_weight * self._DynamicCost(qx, qy)

        return float(min(max(cost, 0.0), 1.0))

    def _DirectionCost(self, px: int, py: int, qx: int, qy: int) -> float:
        """
        梯度方向代价 2/(3π)·(acos(D'(p)·L) + acos(L·D'(q)))

        链接方向 L 取使 D'(p)·L >= 0 的朝向。
        """
        features = self.features_
        lx, ly = qx - px, qy - py
        length = math.hypot(lx, ly)
        lx, ly = lx / length, ly / length

        upx, upy = features.unit_x[py, px], features.unit_y[py, px]
        uqx, uqy = features.unit_x[qy, qx], features.unit_y[qy, qx]

        dp = upx * lx + upy * ly
        if dp < 0:
            lx, ly = -lx, -ly
            dp = -dp
        dq = lx * uqx + ly * uqy

        dp = min(max(dp, -1.0), 1.0)
        dq = min(max(dq, -1.0), 1.0)
        return DIRECTION_COST_SCALE * (math.acos(dp) + math.acos(dq))

    def _DynamicCost(self, qx: int, qy: int) -> float:
        """训练查找表给出的动态代价（梯度幅值与强度两项的均值）"""
        weights = self.weights_
        bins = len(weights.gradient_lut)
        grad_bin = min(int(self.features_.gradient_magnitude[qy, qx] * bins), bins - 1)
        bins = len(weights.intensity_lut)
        intensity_bin = min(int(self.features_.intensity[qy, qx] * bins), bins - 1)
        return 0.5 * (float(weights.gradient_lut[grad_bin]) + float(weights.intensity_lut[intensity_bin]))
