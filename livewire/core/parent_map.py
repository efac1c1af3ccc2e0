#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
父节点表：width*height 的行优先定长数组，记录每个已确定像素的父像素和代价

像素一旦确定，其父像素与代价不再改变。
"""

from typing import Dict, Optional

import numpy as np

from ..common.exceptions import OutOfBoundsError, SessionStateError
from .models import FinalizedEntry, Pixel

NO_PARENT = -1


class ParentMap:
    """稠密父节点表"""

    def __init__(self, width: int, height: int):
        self.width_ = width
        self.height_ = height
        size = width * height
        self.parent_ = np.full(size, NO_PARENT, dtype=np.int64)
        self.cost_ = np.full(size, np.inf, dtype=np.float64)
        self.finalized_ = np.zeros(size, dtype=bool)
        self.count_ = 0

    @property
    def width(self) -> int:
        return self.width_

    @property
    def height(self) -> int:
        return self.height_

    @property
    def FinalizedCount(self) -> int:
        """已确定的像素数"""
        return self.count_

    def Index(self, pixel: Pixel) -> int:
        """像素 -> 行优先下标"""
        x, y = pixel
        if x < 0 or x >= self.width_ or y < 0 or y >= self.height_:
            raise OutOfBoundsError(f"像素超出父节点表范围: {pixel}, size=({self.width_}, {self.height_})")
        return y * self.width_ + x

    def PixelAt(self, index: int) -> Pixel:
        """行优先下标 -> 像素"""
        return (int(index % self.width_), int(index // self.width_))

    def IsFinalized(self, pixel: Pixel) -> bool:
        return bool(self.finalized_[self.Index(pixel)])

    def Finalize(self, pixel: Pixel, parent: Optional[Pixel], cost: float) -> FinalizedEntry:
        """
        确定一个像素

        Raises:
            SessionStateError: 像素已经确定过
        """
        index = self.Index(pixel)
        if self.finalized_[index]:
            raise SessionStateError(f"像素已确定，不能重复写入: {pixel}")
        self.parent_[index] = NO_PARENT if parent is None else self.Index(parent)
        self.cost_[index] = cost
        self.finalized_[index] = True
        self.count_ += 1
        return FinalizedEntry(pixel, parent, cost)

    def Get(self, pixel: Pixel) -> Optional[FinalizedEntry]:
        """已确定像素的记录，未确定返回None"""
        index = self.Index(pixel)
        if not self.finalized_[index]:
            return None
        parent_index = int(self.parent_[index])
        parent = None if parent_index == NO_PARENT else self.PixelAt(parent_index)
        return FinalizedEntry(pixel, parent, float(self.cost_[index]))

    def Parent(self, pixel: Pixel) -> Optional[Pixel]:
        entry = self.Get(pixel)
        return None if entry is None else entry.parent

    def Snapshot(self) -> Dict[str, np.ndarray]:
        """当前状态的拷贝"""
        return {
            'parent': self.parent_.copy(),
            'cost': self.cost_.copy(),
            'finalized': self.finalized_.copy(),
        }
