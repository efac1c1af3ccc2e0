#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径搜索模块：以种子为根、可分批恢复的最小代价搜索（Dijkstra）

功能：
- Step(budget) 每次最多确定 budget 个像素并返回这些像素
- 前沿为空后进入 Exhausted，之后的 Step 不再改变任何状态
- 目标只用于判断何时停止驱动，不影响父节点表的确定顺序
"""

import heapq
import itertools
from typing import List, Optional

import numpy as np
from loguru import logger

from ..common.constants import DEFAULT_STEP_BUDGET
from .cost_model import CostModel
from .models import FinalizedEntry, Pixel, SearchState
from .parent_map import NO_PARENT, ParentMap


class PathSearch:
    """
    可恢复的最佳优先搜索

    示例:
        ```python
        search = PathSearch(cost_model, seed=(10, 10))
        search.SetTarget((40, 25))
        while not search.IsTargetReached() and search.State is not SearchState.EXHAUSTED:
            search.Step(500)
        ```
    """

    def __init__(self, cost_model: CostModel, seed: Pixel):
        self.cost_model_ = cost_model
        self.width_ = cost_model.width
        self.height_ = cost_model.height
        self.parent_map_ = ParentMap(self.width_, self.height_)
        self.seed_ = self.parent_map_.PixelAt(self.parent_map_.Index(seed))
        self.target_: Optional[Pixel] = None
        self.state_ = SearchState.IDLE

        size = self.width_ * self.height_
        self.tentative_cost_ = np.full(size, np.inf, dtype=np.float64)
        self.tentative_parent_ = np.full(size, NO_PARENT, dtype=np.int64)

        # 前沿：(代价, 入队序号, 下标)，入队序号保证同代价时先进先出
        self.counter_ = itertools.count()
        seed_index = self.parent_map_.Index(self.seed_)
        self.tentative_cost_[seed_index] = 0.0
        self.frontier_ = [(0.0, next(self.counter_), seed_index)]

    @property
    def seed(self) -> Pixel:
        return self.seed_

    @property
    def target(self) -> Optional[Pixel]:
        return self.target_

    @property
    def State(self) -> SearchState:
        return self.state_

    @property
    def parent_map(self) -> ParentMap:
        return self.parent_map_

    @property
    def FrontierSize(self) -> int:
        """前沿中的条目数（含过期条目）"""
        return len(self.frontier_)

    def SetTarget(self, pixel: Pixel) -> None:
        """记录目标像素，不推进搜索"""
        self.parent_map_.Index(pixel)
        self.target_ = (int(pixel[0]), int(pixel[1]))

    def IsFinalized(self, pixel: Pixel) -> bool:
        return self.parent_map_.IsFinalized(pixel)

    def IsTargetReached(self) -> bool:
        return self.target_ is not None and self.parent_map_.IsFinalized(self.target_)

    def IsTargetUnreachable(self) -> bool:
        """前沿耗尽且目标仍未确定"""
        return (
            self.target_ is not None
            and self.state_ is SearchState.EXHAUSTED
            and not self.parent_map_.IsFinalized(self.target_)
        )

    def Step(self, budget: int = DEFAULT_STEP_BUDGET) -> List[FinalizedEntry]:
        """
        最多确定 budget 个像素

        Args:
            budget: 本次最多确定的像素数

        Returns:
            本次调用确定的像素列表 [(pixel, parent, cost), ...]
        """
        if self.state_ is SearchState.EXHAUSTED or budget <= 0:
            return []

        self.state_ = SearchState.SEARCHING
        parent_map = self.parent_map_
        finalized: List[FinalizedEntry] = []

        while len(finalized) < budget:
            index = self._PopFrontier()
            if index is None:
                break

            cost = float(self.tentative_cost_[index])
            pixel = parent_map.PixelAt(index)
            parent_index = int(self.tentative_parent_[index])
            parent = None if parent_index == NO_PARENT else parent_map.PixelAt(parent_index)
            finalized.append(parent_map.Finalize(pixel, parent, cost))

            for neighbor, link_cost in self.cost_model_.Neighbors(pixel):
                if link_cost == np.inf:
                    continue
                neighbor_index = neighbor[1] * self.width_ + neighbor[0]
                if parent_map.finalized_[neighbor_index]:
                    continue
                new_cost = cost + link_cost
                if new_cost < self.tentative_cost_[neighbor_index]:
                    self.tentative_cost_[neighbor_index] = new_cost
                    self.tentative_parent_[neighbor_index] = index
                    heapq.heappush(self.frontier_, (new_cost, next(self.counter_), neighbor_index))

        self._PruneFrontier()
        if not self.frontier_:
            self.state_ = SearchState.EXHAUSTED
            logger.debug(f"[search] 前沿耗尽: seed={self.seed_}, 已确定像素数={parent_map.FinalizedCount}")

        return finalized

    def RunUntilTarget(self, budget: int = DEFAULT_STEP_BUDGET) -> bool:
        """
        分批驱动搜索直到目标确定或前沿耗尽

        Returns:
            目标是否已确定
        """
        if self.target_ is None:
            raise ValueError("尚未设置目标像素")

        batches = 0
        while not self.IsTargetReached() and self.state_ is not SearchState.EXHAUSTED:
            self.Step(budget)
            batches += 1

        reached = self.IsTargetReached()
        logger.debug(f"[search] 驱动结束: target={self.target_}, 批次数={batches}, 到达={reached}")
        return reached

    def _PopFrontier(self) -> Optional[int]:
        """弹出代价最小且未过期的下标，前沿为空返回None"""
        self._PruneFrontier()
        if not self.frontier_:
            return None
        _, _, index = heapq.heappop(self.frontier_)
        return index

    def _PruneFrontier(self) -> None:
        """丢弃堆顶已确定或代价已过期的条目"""
        frontier = self.frontier_
        while frontier:
            cost, _, index = frontier[0]
            if self.parent_map_.finalized_[index] or cost > self.tentative_cost_[index]:
                heapq.heappop(frontier)
                continue
            break
