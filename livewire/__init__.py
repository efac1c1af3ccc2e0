#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
livewire 主包
交互式最小代价边界描绘（intelligent scissors）引擎
"""

__version__ = "0.1.0"

from .common.exceptions import (
    LiveWireError,
    ConfigError,
    OutOfBoundsError,
    UnreachableError,
    SessionStateError,
)
from .config import LiveWireConfig, load_config
from .core import Raster, TracedPath, FinalizedEntry, SearchState, StrokeState
from .engine import LiveWireEngine, LiveWireSession

__all__ = [
    'LiveWireError',
    'ConfigError',
    'OutOfBoundsError',
    'UnreachableError',
    'SessionStateError',
    'LiveWireConfig',
    'load_config',
    'Raster',
    'TracedPath',
    'FinalizedEntry',
    'SearchState',
    'StrokeState',
    'LiveWireEngine',
    'LiveWireSession',
]
