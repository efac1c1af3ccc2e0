#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
特征提取模块：从强度栅格计算逐像素边缘特征

功能：
- 前向差分梯度（边界复制），归一化梯度幅值与梯度代价
- 边缘方向单位向量（垂直于梯度）
- 拉普拉斯过零点指示
"""

import cv2
import numpy as np
from loguru import logger

from ..common.constants import EPSILON
from .models import FeatureField, Raster


class FeatureExtractor:
    """
    边缘特征提取器

    每次加载栅格时运行一次，结果在会话期间只读。

    示例:
        ```python
        features = FeatureExtractor().Compute(raster)
        ```
    """

    def Compute(self, raster: Raster) -> FeatureField:
        """
        计算栅格的特征场

        Args:
            raster: 强度栅格

        Returns:
            FeatureField
        """
        blocked = raster.BlockedMask()
        intensity = self.NormalizeIntensity(raster.data, blocked)

        grad_x, grad_y = self.ForwardGradient(intensity)
        magnitude = np.hypot(grad_x, grad_y)
        max_magnitude = float(magnitude.max())
        if max_magnitude > EPSILON:
            magnitude_norm = magnitude / max_magnitude
        else:
            # 平坦栅格：梯度代价全部取最大值
            magnitude_norm = np.zeros_like(magnitude)

        unit_x = np.zeros_like(magnitude)
        unit_y = np.zeros_like(magnitude)
        nonzero = magnitude > EPSILON
        unit_x[nonzero] = grad_y[nonzero] / magnitude[nonzero]
        unit_y[nonzero] = -grad_x[nonzero] / magnitude[nonzero]

        laplace_cost = self.LaplaceZeroCrossingCost(intensity)

        logger.debug(
            f"特征提取完成: size=({raster.width}, {raster.height}), "
            f"最大梯度={max_magnitude:.4f}, 过零点数={int((laplace_cost == 0).sum())}, "
            f"不可通行像素={int(blocked.sum())}"
        )

        return FeatureField(
            intensity=intensity,
            gradient_magnitude=magnitude_norm,
            gradient_cost=1.0 - magnitude_norm,
            laplace_cost=laplace_cost,
            unit_x=unit_x,
            unit_y=unit_y,
            blocked=blocked,
        )

    @staticmethod
    def NormalizeIntensity(data: np.ndarray, blocked: np.ndarray) -> np.ndarray:
        """
        将强度线性归一化到 [0,1]，非有限值替换为有限最小值

        Args:
            data: 原始强度
            blocked: 不可通行掩码

        Returns:
            float64 数组
        """
        grey = np.array(data, dtype=np.float64)
        finite = np.isfinite(grey)
        if not finite.any():
            return np.zeros_like(grey)

        low = float(grey[finite].min())
        high = float(grey[finite].max())
        grey[~finite] = low
        if high - low <= EPSILON:
            return np.zeros_like(grey)
        return (grey - low) / (high - low)

    @staticmethod
    def ForwardGradient(grey: np.ndarray):
        """
        前向差分梯度，越界读取复制边界值

        Returns:
            (grad_x, grad_y)
        """
        padded = np.pad(grey, ((0, 1), (0, 1)), mode='edge')
        grad_x = padded[:-1, 1:] - grey
        grad_y = padded[1:, :-1] - grey
        return grad_x, grad_y

    @staticmethod
    def LaplaceZeroCrossingCost(grey: np.ndarray) -> np.ndarray:
        """
        拉普拉斯过零点代价

        当某个4邻域像素的拉普拉斯符号相反且本像素响应不弱于它时视为过零点。
        平坦区域的精确零值不算过零点。

        Returns:
            过零点为0，其余为1的 float64 数组
        """
        laplace = cv2.Laplacian(grey, cv2.CV_64F, ksize=1, borderType=cv2.BORDER_REPLICATE)
        laplace[np.abs(laplace) <= EPSILON] = 0.0

        padded = np.pad(laplace, 1, mode='edge')
        h, w = laplace.shape
        crossing = np.zeros((h, w), dtype=bool)
        for dy, dx in ((0, 1), (1, 0), (0, -1), (-1, 0)):
            neighbor = padded[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
            opposite = laplace * neighbor < 0
            crossing |= opposite & (np.abs(laplace) >= np.abs(neighbor))

        return np.where(crossing, 0.0, 1.0)


def compute_features(raster: Raster) -> FeatureField:
    """计算栅格特征场（便捷函数）"""
    return FeatureExtractor().Compute(raster)
