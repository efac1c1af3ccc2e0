#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径构建模块：从父节点表回溯路径，并拼接多段已锚定路径
"""

from typing import List, Optional, Sequence

from loguru import logger

from ..common.exceptions import UnreachableError
from .models import Pixel, TracedPath
from .parent_map import ParentMap


def extract_path(parent_map: ParentMap, target: Pixel) -> List[Pixel]:
    """
    沿父节点回溯，返回 种子 -> 目标 顺序的像素列表

    Args:
        parent_map: 父节点表
        target: 目标像素

    Returns:
        path: [(x, y), ...]

    Raises:
        UnreachableError: 目标尚未确定
    """
    entry = parent_map.Get(target)
    if entry is None:
        raise UnreachableError(f"目标像素尚未确定: {target}")

    path: List[Pixel] = [entry.pixel]
    cur = entry.parent
    # 父链长度不可能超过像素总数
    limit = parent_map.width * parent_map.height
    while cur is not None:
        path.append(cur)
        if len(path) > limit:
            raise RuntimeError(f"父节点链存在环: target={target}")
        cur = parent_map.Parent(cur)
    path.reverse()
    return path


class PathBuilder:
    """
    多段路径累积器

    已锚定的各段按顺序拼接，相邻两段共享的锚点只出现一次。
    """

    def __init__(self, first_seed: Pixel):
        self.first_seed_ = first_seed
        self.committed_: List[Pixel] = [first_seed]
        self.control_points_: List[Pixel] = [first_seed]

    @property
    def first_seed(self) -> Pixel:
        return self.first_seed_

    @property
    def committed(self) -> List[Pixel]:
        """已冻结的路径（拷贝）"""
        return list(self.committed_)

    @property
    def control_points(self) -> List[Pixel]:
        return list(self.control_points_)

    @property
    def AnchorCount(self) -> int:
        """首个种子之后的锚点数"""
        return len(self.control_points_) - 1

    def Anchor(self, segment: Sequence[Pixel]) -> None:
        """
        冻结一段路径并追加

        Args:
            segment: 从当前段种子到新锚点的路径，首像素必须等于已冻结路径的末像素
        """
        if not segment:
            raise ValueError("锚定路径段不能为空")
        if segment[0] != self.committed_[-1]:
            raise ValueError(f"路径段起点 {segment[0]} 与当前末端 {self.committed_[-1]} 不一致")

        self.committed_.extend(segment[1:])
        anchor = segment[-1]
        self.control_points_.append(anchor)
        logger.debug(f"[builder] 锚定: anchor={anchor}, 段长度={len(segment)}, 总长度={len(self.committed_)}")

    def Compose(self, segment: Optional[Sequence[Pixel]]) -> List[Pixel]:
        """已冻结路径 + 当前实时段（预览）"""
        if not segment:
            return list(self.committed_)
        if segment[0] != self.committed_[-1]:
            raise ValueError(f"路径段起点 {segment[0]} 与当前末端 {self.committed_[-1]} 不一致")
        return self.committed_ + list(segment[1:])

    def Build(self, segment: Optional[Sequence[Pixel]], closed: bool) -> TracedPath:
        """生成最终描边结果"""
        points = self.Compose(segment)
        return TracedPath(points=points, control_points=list(self.control_points_), closed=closed)
