#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心数据模型：栅格、特征场、特征权重、搜索结果和路径
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from ..common.exceptions import ConfigError, OutOfBoundsError

Pixel = Tuple[int, int]  # (x, y)


class SearchState(Enum):
    """路径搜索状态"""
    IDLE = "idle"
    SEARCHING = "searching"
    EXHAUSTED = "exhausted"


class StrokeState(Enum):
    """描边状态：Seeded -> Tracking -> {Anchored -> Seeded}* -> Closed"""
    SEEDED = "seeded"
    TRACKING = "tracking"
    ANCHORED = "anchored"
    CLOSED = "closed"
    ABORTED = "aborted"


class FinalizedEntry(NamedTuple):
    """一个已确定像素：像素、父像素（种子为None）、累计代价"""
    pixel: Pixel
    parent: Optional[Pixel]
    cost: float


@dataclass(frozen=True)
class Raster:
    """
    只读强度栅格

    data 为 (height, width) 的 float64 数组；mask 为可选的布尔数组，True 表示可通行。
    非有限值（NaN/inf）的像素视为不可通行。
    """
    width: int
    height: int
    data: np.ndarray
    mask: Optional[np.ndarray] = None

    @classmethod
    def FromBuffer(cls, width: int, height: int, buffer, mask=None) -> 'Raster':
        """
        从行优先的一维强度缓冲区构建栅格

        Args:
            width: 栅格宽度
            height: 栅格高度
            buffer: 长度为 width*height 的强度序列（list / bytes / ndarray）
            mask: 可选，(height, width) 或长度为 width*height 的可通行掩码

        Returns:
            Raster 对象

        Raises:
            ConfigError: 尺寸无效或缓冲区长度不匹配
        """
        if not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)):
            error_msg = f"栅格尺寸必须是整数: width={width}, height={height}"
            logger.error(error_msg)
            raise ConfigError(error_msg)
        if width <= 0 or height <= 0:
            error_msg = f"栅格尺寸必须大于0: width={width}, height={height}"
            logger.error(error_msg)
            raise ConfigError(error_msg)

        if isinstance(buffer, (bytes, bytearray, memoryview)):
            samples = np.frombuffer(buffer, dtype=np.uint8).astype(np.float64)
        else:
            try:
                samples = np.asarray(buffer, dtype=np.float64).ravel()
            except (TypeError, ValueError) as e:
                error_msg = f"强度缓冲区无法转换为数值数组: {e}"
                logger.error(error_msg)
                raise ConfigError(error_msg) from e

        expected = int(width) * int(height)
        if samples.size != expected:
            error_msg = f"强度缓冲区长度不匹配: 期望 {expected} ({width}x{height})，实际 {samples.size}"
            logger.error(error_msg)
            raise ConfigError(error_msg)

        data = samples.reshape(int(height), int(width)).copy()
        data.setflags(write=False)

        mask_array = None
        if mask is not None:
            mask_array = np.asarray(mask, dtype=bool)
            shape_ok = (
                (mask_array.ndim == 1 and mask_array.size == expected)
                or mask_array.shape == (int(height), int(width))
            )
            if not shape_ok:
                error_msg = f"掩码形状不匹配: 期望 ({height}, {width}) 或长度 {expected}，实际 {mask_array.shape}"
                logger.error(error_msg)
                raise ConfigError(error_msg)
            mask_array = mask_array.reshape(int(height), int(width)).copy()
            mask_array.setflags(write=False)

        return cls(width=int(width), height=int(height), data=data, mask=mask_array)

    @property
    def size(self) -> int:
        """像素总数"""
        return self.width * self.height

    def Contains(self, pixel: Pixel) -> bool:
        """像素是否在栅格范围内"""
        x, y = pixel
        return 0 <= x < self.width and 0 <= y < self.height

    def CheckBounds(self, pixel: Sequence[int]) -> Pixel:
        """
        校验并规范化像素坐标

        Raises:
            OutOfBoundsError: 坐标超出 [0,width)x[0,height)
        """
        try:
            x, y = int(pixel[0]), int(pixel[1])
        except (TypeError, ValueError, IndexError) as e:
            raise OutOfBoundsError(f"无效的像素坐标: {pixel}") from e
        if not self.Contains((x, y)):
            error_msg = f"像素超出栅格范围: {(x, y)}, raster_size=({self.width}, {self.height})"
            logger.warning(error_msg)
            raise OutOfBoundsError(error_msg)
        return (x, y)

    def BlockedMask(self) -> np.ndarray:
        """不可通行像素的布尔数组"""
        blocked = ~np.isfinite(self.data)
        if self.mask is not None:
            blocked |= ~self.mask
        return blocked


@dataclass
class FeatureField:
    """逐像素静态边缘特征"""
    intensity: np.ndarray           # 归一化强度 [0,1]
    gradient_magnitude: np.ndarray  # 归一化梯度幅值 [0,1]
    gradient_cost: np.ndarray       # 1 - 梯度幅值
    laplace_cost: np.ndarray        # 过零点为0，否则为1
    unit_x: np.ndarray              # 边缘方向单位向量 x 分量
    unit_y: np.ndarray              # 边缘方向单位向量 y 分量
    blocked: np.ndarray             # 不可通行像素

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width)"""
        return self.intensity.shape


@dataclass
class FeatureWeights:
    """静态特征权重与训练得到的动态代价查找表"""
    laplace: float
    gradient: float
    direction: float
    static_weight: float = 1.0
    dynamic_weight: float = 0.0
    gradient_lut: Optional[np.ndarray] = None
    intensity_lut: Optional[np.ndarray] = None

    @classmethod
    def Neutral(cls, cost_config) -> 'FeatureWeights':
        """未训练（中性）权重：只使用静态特征"""
        return cls(
            laplace=cost_config.laplace_weight,
            gradient=cost_config.gradient_weight,
            direction=cost_config.direction_weight,
        )

    @property
    def trained(self) -> bool:
        return self.gradient_lut is not None and self.intensity_lut is not None


@dataclass
class TracedPath:
    """完成的描边结果"""
    points: List[Pixel] = field(default_factory=list)
    control_points: List[Pixel] = field(default_factory=list)
    closed: bool = False

    def ToDict(self) -> dict:
        """转换为可序列化字典"""
        return {
            'points': [list(p) for p in self.points],
            'control_points': [list(p) for p in self.control_points],
            'closed': self.closed,
        }
