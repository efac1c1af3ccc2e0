#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
自定义异常类：定义 live-wire 引擎的专用异常
"""


class LiveWireError(Exception):
    """live-wire 引擎基础异常类"""
    pass


class ConfigError(LiveWireError):
    """配置错误异常（栅格尺寸与缓冲区长度不符、配置文件无效等）"""
    pass


class OutOfBoundsError(LiveWireError):
    """像素坐标超出栅格范围异常"""
    pass


class UnreachableError(LiveWireError):
    """目标像素无法从种子点到达异常"""
    pass


class SessionStateError(LiveWireError):
    """会话状态错误异常（会话已结束、尚未加载栅格等）"""
    pass


class DegenerateTrainingError(LiveWireError):
    """训练样本退化异常（邻域平坦），仅在训练器内部使用"""
    pass
