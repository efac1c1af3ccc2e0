#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心模块：特征提取、代价模型、训练、搜索与路径构建
"""

from .models import (
    Pixel,
    Raster,
    FeatureField,
    FeatureWeights,
    FinalizedEntry,
    TracedPath,
    SearchState,
    StrokeState,
)
from .feature_extractor import FeatureExtractor, compute_features
from .cost_model import CostModel
from .trainer import Trainer
from .parent_map import ParentMap
from .path_search import PathSearch
from .path_builder import PathBuilder, extract_path

__all__ = [
    'Pixel',
    'Raster',
    'FeatureField',
    'FeatureWeights',
    'FinalizedEntry',
    'TracedPath',
    'SearchState',
    'StrokeState',
    'FeatureExtractor',
    'compute_features',
    'CostModel',
    'Trainer',
    'ParentMap',
    'PathSearch',
    'PathBuilder',
    'extract_path',
]
