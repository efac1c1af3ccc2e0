#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
动态训练模块：在新种子/锚点附近采样，生成偏向相似边缘的动态代价

功能：
- 优先使用上一段已锚定路径的末端像素作为样本
- 否则在种子邻域采样，按梯度强度加权
- 构建梯度幅值与强度的加权直方图，高斯平滑后转换为代价查找表
- 样本退化（平坦邻域）时回退到中性权重
"""

import math
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from ..common.constants import EPSILON
from ..common.exceptions import DegenerateTrainingError
from ..config.models import CostConfig, TrainingConfig
from .models import FeatureField, FeatureWeights, Pixel


class Trainer:
    """
    动态代价训练器

    示例:
        ```python
        trainer = Trainer(config.training, config.cost)
        weights = trainer.Train(seed, features)
        ```
    """

    def __init__(self, training_config: Optional[TrainingConfig] = None, cost_config: Optional[CostConfig] = None):
        self.config_ = training_config or TrainingConfig()
        self.cost_config_ = cost_config or CostConfig()

    def Train(
        self,
        seed: Pixel,
        features: FeatureField,
        segment: Optional[Sequence[Pixel]] = None,
    ) -> FeatureWeights:
        """
        为新种子训练特征权重

        Args:
            seed: 种子或锚点像素
            features: 栅格特征场
            segment: 上一段已锚定路径（起点到锚点顺序），可选

        Returns:
            FeatureWeights；样本退化时返回中性权重
        """
        if not self.config_.enabled:
            return FeatureWeights.Neutral(self.cost_config_)

        try:
            xs, ys, sample_weights = self._CollectSamples(seed, features, segment)
            gradient_lut, intensity_lut = self._BuildLookups(features, xs, ys, sample_weights)
        except DegenerateTrainingError as e:
            logger.warning(f"训练样本退化，使用中性权重: seed={seed}, 原因: {e}")
            return FeatureWeights.Neutral(self.cost_config_)

        logger.debug(f"训练完成: seed={seed}, 样本数={len(xs)}")
        return FeatureWeights(
            laplace=self.cost_config_.laplace_weight,
            gradient=self.cost_config_.gradient_weight,
            direction=self.cost_config_.direction_weight,
            static_weight=self.cost_config_.trained_static_weight,
            dynamic_weight=self.cost_config_.trained_dynamic_weight,
            gradient_lut=gradient_lut,
            intensity_lut=intensity_lut,
        )

    def _CollectSamples(
        self,
        seed: Pixel,
        features: FeatureField,
        segment: Optional[Sequence[Pixel]],
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """收集样本坐标与权重"""
        blocked = features.blocked

        if segment is not None and len(segment) >= self.config_.min_samples:
            # 上一段路径本身就是用户确认过的边缘，等权采样
            tail = list(segment)[-self.config_.segment_length:]
            points = [(x, y) for x, y in tail if not blocked[y, x]]
            if len(points) >= self.config_.min_samples:
                xs = np.array([p[0] for p in points], dtype=np.intp)
                ys = np.array([p[1] for p in points], dtype=np.intp)
                return xs, ys, np.ones(len(points), dtype=np.float64)
            logger.debug(f"上一段路径有效像素不足，改用邻域采样: {len(points)}")

        height, width = features.shape
        radius = self.config_.radius
        sx, sy = seed
        x0, x1 = max(sx - radius, 0), min(sx + radius + 1, width)
        y0, y1 = max(sy - radius, 0), min(sy + radius + 1, height)

        window_y, window_x = np.mgrid[y0:y1, x0:x1]
        xs = window_x.ravel()
        ys = window_y.ravel()
        # 按梯度强度平方加权，平坦像素不参与
        sample_weights = features.gradient_magnitude[ys, xs] ** 2
        sample_weights[blocked[ys, xs]] = 0.0

        valid = sample_weights > EPSILON
        if int(valid.sum()) < self.config_.min_samples:
            raise DegenerateTrainingError(f"有效样本不足: {int(valid.sum())} < {self.config_.min_samples}")

        return xs[valid], ys[valid], sample_weights[valid]

    def _BuildLookups(
        self,
        features: FeatureField,
        xs: np.ndarray,
        ys: np.ndarray,
        sample_weights: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """构建梯度幅值与强度的代价查找表"""
        if float(sample_weights.sum()) <= EPSILON:
            raise DegenerateTrainingError("样本总权重为0")

        gradient_lut = self._HistogramCost(features.gradient_magnitude[ys, xs], sample_weights)
        intensity_lut = self._HistogramCost(features.intensity[ys, xs], sample_weights)
        return gradient_lut, intensity_lut

    def _HistogramCost(self, values: np.ndarray, sample_weights: np.ndarray) -> np.ndarray:
        """
        加权直方图 -> 高斯平滑 -> 代价 1 - h/max(h)

        Args:
            values: [0,1] 内的特征值
            sample_weights: 样本权重

        Returns:
            长度为 histogram_bins 的代价查找表
        """
        bins = self.config_.histogram_bins
        indices = np.minimum((values * bins).astype(np.intp), bins - 1)
        hist = np.bincount(indices, weights=sample_weights, minlength=bins).astype(np.float64)

        sigma = self.config_.histogram_sigma
        if sigma > 0:
            ksize = 2 * int(math.ceil(3 * sigma)) + 1
            kernel = cv2.getGaussianKernel(ksize, sigma).ravel()
            half = ksize // 2
            hist = np.convolve(np.pad(hist, half), kernel, mode='valid')

        peak = float(hist.max())
        if peak <= EPSILON:
            raise DegenerateTrainingError("直方图为空")
        return 1.0 - hist / peak
