#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
live-wire 引擎：交互工具层调用的唯一入口

LiveWireEngine 负责加载栅格并创建会话；LiveWireSession 是显式的会话对象，
持有当前段的搜索状态和已锚定的多段路径，不依赖任何全局状态。

示例:
    ```python
    engine = LiveWireEngine()
    engine.LoadRaster(width, height, pixels)
    session = engine.Seed((12, 30))
    session.SetTarget((40, 42))
    session.Step()                  # 在事件循环空闲时反复调用
    preview = session.Preview()     # 目标已确定时返回预览路径
    session.Anchor((40, 42))
    result = session.Close((13, 31))
    ```
"""

from typing import List, Optional, Sequence

import cv2
import numpy as np
from loguru import logger

from .common.exceptions import SessionStateError, UnreachableError
from .config.models import LiveWireConfig
from .core.cost_model import CostModel
from .core.feature_extractor import FeatureExtractor
from .core.models import FeatureField, FeatureWeights, FinalizedEntry, Pixel, Raster, StrokeState, TracedPath
from .core.path_builder import PathBuilder, extract_path
from .core.path_search import PathSearch
from .core.trainer import Trainer


class LiveWireSession:
    """
    一次描边的会话状态

    状态流转: Seeded -> Tracking -> {Anchored -> Seeded}* -> Closed，Abort 可随时丢弃。
    """

    def __init__(
        self,
        raster: Raster,
        features: FeatureField,
        config: LiveWireConfig,
        trainer: Trainer,
        seed: Pixel,
    ):
        self.raster_ = raster
        self.features_ = features
        self.config_ = config
        self.trainer_ = trainer
        self.builder_ = PathBuilder(seed)
        self.state_ = StrokeState.SEEDED

        self.cost_model_: Optional[CostModel] = None
        self.search_: Optional[PathSearch] = None
        self._StartSegment(seed, segment=None)
        logger.info(f"[livewire] 新描边: seed={seed}")

    # ------------------------------------------------------------------
    # 属性
    # ------------------------------------------------------------------

    @property
    def State(self) -> StrokeState:
        return self.state_

    @property
    def first_seed(self) -> Pixel:
        return self.builder_.first_seed

    @property
    def seed(self) -> Optional[Pixel]:
        """当前段的种子（首个种子或最近的锚点）"""
        return None if self.search_ is None else self.search_.seed

    @property
    def target(self) -> Optional[Pixel]:
        return None if self.search_ is None else self.search_.target

    @property
    def search(self) -> Optional[PathSearch]:
        return self.search_

    @property
    def weights(self) -> Optional[FeatureWeights]:
        return None if self.cost_model_ is None else self.cost_model_.weights

    @property
    def control_points(self) -> List[Pixel]:
        return self.builder_.control_points

    @property
    def IsActive(self) -> bool:
        return self.state_ not in (StrokeState.CLOSED, StrokeState.ABORTED)

    # ------------------------------------------------------------------
    # 交互接口
    # ------------------------------------------------------------------

    def SetTarget(self, point: Sequence[int]) -> None:
        """
        设置光标像素（非阻塞，不推进搜索）

        Raises:
            OutOfBoundsError: 超出栅格范围
            SessionStateError: 会话已结束
        """
        self._EnsureActive()
        pixel = self.raster_.CheckBounds(point)
        self.search_.SetTarget(pixel)
        self.state_ = StrokeState.TRACKING

    def Step(self, budget: Optional[int] = None) -> List[FinalizedEntry]:
        """
        推进搜索，返回本次新确定的像素；会话结束后返回空列表

        Args:
            budget: 本次最多确定的像素数，默认使用配置的 step_budget
        """
        if not self.IsActive:
            return []
        if budget is None:
            budget = self.config_.search.step_budget
        return self.search_.Step(budget)

    def ExtractSegment(self, point: Sequence[int]) -> List[Pixel]:
        """
        当前段 种子 -> point 的路径，必要时分批驱动搜索

        Raises:
            OutOfBoundsError: 超出栅格范围
            UnreachableError: 前沿耗尽仍未到达
        """
        self._EnsureActive()
        pixel = self.raster_.CheckBounds(point)
        search = self.search_
        budget = self.config_.search.step_budget

        while not search.IsFinalized(pixel) and search.Step(budget):
            pass

        if not search.IsFinalized(pixel):
            error_msg = f"目标不可达: seed={search.seed}, target={pixel}"
            logger.warning(f"[livewire] {error_msg}")
            raise UnreachableError(error_msg)
        return extract_path(search.parent_map, pixel)

    def ExtractPath(self, point: Sequence[int]) -> List[Pixel]:
        """已锚定的多段路径 + 当前段到 point 的路径"""
        return self.builder_.Compose(self.ExtractSegment(point))

    def Preview(self) -> Optional[List[Pixel]]:
        """当前目标已确定时返回完整预览路径，否则返回None（不推进搜索）"""
        if not self.IsActive or not self.search_.IsTargetReached():
            return None
        return self.builder_.Compose(extract_path(self.search_.parent_map, self.search_.target))

    def IsNearFirstSeed(self, point: Sequence[int]) -> bool:
        """point 是否在首个种子的闭合容差内"""
        tolerance = self.config_.search.close_tolerance
        x0, y0 = self.builder_.first_seed
        return abs(point[0] - x0) < tolerance and abs(point[1] - y0) < tolerance

    def Anchor(self, point: Sequence[int]) -> List[Pixel]:
        """
        冻结到 point 的路径段并以 point 为种子开始新的一段

        Returns:
            冻结后的完整路径

        Raises:
            UnreachableError: point 不可达，会话保持不变
        """
        segment = self.ExtractSegment(point)
        if len(segment) == 1:
            logger.debug(f"[livewire] 锚点与当前种子相同，忽略: {segment[0]}")
            return self.builder_.committed

        self.state_ = StrokeState.ANCHORED
        self.builder_.Anchor(segment)
        anchor = segment[-1]
        self._StartSegment(anchor, segment=segment)
        logger.info(f"[livewire] 锚定: anchor={anchor}, 锚点数={self.builder_.AnchorCount}")
        return self.builder_.committed

    def Click(self, point: Sequence[int]) -> Optional[TracedPath]:
        """
        鼠标点击：靠近首个种子时闭合描边，否则锚定

        Returns:
            闭合时返回描边结果，否则返回None
        """
        self._EnsureActive()
        pixel = self.raster_.CheckBounds(point)
        if self.builder_.AnchorCount > 0 and self.IsNearFirstSeed(pixel):
            return self.Close(pixel)
        self.Anchor(pixel)
        return None

    def Close(self, point: Optional[Sequence[int]] = None) -> TracedPath:
        """
        结束描边并释放搜索状态

        Args:
            point: 结束像素，默认使用当前目标

        Returns:
            TracedPath；至少有一个锚点且结束像素在首个种子容差内时 closed=True
        """
        self._EnsureActive()
        target = self.raster_.CheckBounds(point) if point is not None else self.search_.target

        segment = None
        if target is not None:
            try:
                segment = self.ExtractSegment(target)
            except UnreachableError:
                logger.warning(f"[livewire] 结束像素不可达，只保留已锚定路径: {target}")

        points = self.builder_.Compose(segment)
        closed = (
            segment is not None
            and self.builder_.AnchorCount > 0
            and len(points) > 2
            and self.IsNearFirstSeed(target)
        )
        result = self.builder_.Build(segment, closed)

        self._Release(StrokeState.CLOSED)
        logger.info(f"[livewire] 描边结束: 点数={len(result.points)}, 闭合={closed}")
        return result

    def Abort(self) -> None:
        """丢弃当前描边"""
        if self.IsActive:
            self._Release(StrokeState.ABORTED)
            logger.info("[livewire] 描边已取消")

    # ------------------------------------------------------------------
    # 内部方法
    # ------------------------------------------------------------------

    def _StartSegment(self, seed: Pixel, segment: Optional[Sequence[Pixel]]) -> None:
        weights = self.trainer_.Train(seed, self.features_, segment)
        self.cost_model_ = CostModel(self.features_, weights)
        self.search_ = PathSearch(self.cost_model_, seed)
        self.state_ = StrokeState.SEEDED

    def _Release(self, state: StrokeState) -> None:
        self.search_ = None
        self.cost_model_ = None
        self.state_ = state

    def _EnsureActive(self) -> None:
        if not self.IsActive:
            raise SessionStateError(f"会话已结束: state={self.state_.value}")


class LiveWireEngine:
    """
    live-wire 引擎

    示例:
        ```python
        engine = LiveWireEngine(load_config("configs/livewire.yaml"))
        engine.LoadImage(cv2.imread("slice.png", cv2.IMREAD_GRAYSCALE))
        session = engine.Seed((10, 10))
        ```
    """

    def __init__(self, config: Optional[LiveWireConfig] = None):
        self.config_ = config or LiveWireConfig()
        self.extractor_ = FeatureExtractor()
        self.trainer_ = Trainer(self.config_.training, self.config_.cost)
        self.raster_: Optional[Raster] = None
        self.features_: Optional[FeatureField] = None

    @property
    def config(self) -> LiveWireConfig:
        return self.config_

    @property
    def raster(self) -> Optional[Raster]:
        return self.raster_

    @property
    def features(self) -> Optional[FeatureField]:
        return self.features_

    def LoadRaster(self, width: int, height: int, buffer, mask=None) -> Raster:
        """
        加载强度栅格并计算特征

        Raises:
            ConfigError: 缓冲区长度与 width*height 不符（引擎状态保持不变）
        """
        raster = Raster.FromBuffer(width, height, buffer, mask)
        features = self.extractor_.Compute(raster)
        self.raster_ = raster
        self.features_ = features
        logger.info(f"[livewire] 栅格已加载: size=({width}, {height})")
        return raster

    def LoadImage(self, image: np.ndarray, mask=None) -> Raster:
        """从图像数组加载栅格，彩色图像先转换为灰度"""
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        height, width = image.shape[:2]
        return self.LoadRaster(width, height, image.ravel(), mask)

    def Seed(self, point: Sequence[int]) -> LiveWireSession:
        """
        放置首个种子并开始新的描边会话

        Raises:
            SessionStateError: 尚未加载栅格
            OutOfBoundsError: 种子超出栅格范围
        """
        if self.raster_ is None:
            raise SessionStateError("尚未加载栅格")
        seed = self.raster_.CheckBounds(point)
        return LiveWireSession(self.raster_, self.features_, self.config_, self.trainer_, seed)
