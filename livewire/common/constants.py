#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
常量定义：集中管理所有魔法数字和默认参数
"""

import math

# =============================
# 搜索相关常量
# =============================

# 8邻接移动方向 (dx, dy)，下标即方向编号
DIRECTIONS_8WAY = [
    ( 1,  0),   # 右
    ( 1,  1),   # 右下
    ( 0,  1),   # 下
    (-1,  1),   # 左下
    (-1,  0),   # 左
    (-1, -1),   # 左上
    ( 0, -1),   # 上
    ( 1, -1),   # 右上
]

# 每次 Step 默认最多确定的像素数
DEFAULT_STEP_BUDGET: int = 500

# 回到首个种子点时闭合路径的像素容差
DEFAULT_CLOSE_TOLERANCE: int = 5

# =============================
# 代价相关常量
# =============================

# 静态特征权重：拉普拉斯过零点 / 梯度幅值 / 梯度方向
DEFAULT_LAPLACE_WEIGHT: float = 0.43
DEFAULT_GRADIENT_WEIGHT: float = 0.43
DEFAULT_DIRECTION_WEIGHT: float = 0.14

# 训练后静态代价与动态代价的混合权重
DEFAULT_TRAINED_STATIC_WEIGHT: float = 0.5
DEFAULT_TRAINED_DYNAMIC_WEIGHT: float = 0.5

# 梯度方向代价归一化系数 2/(3π)
DIRECTION_COST_SCALE: float = 2.0 / (3.0 * math.pi)

# 数值零阈值
EPSILON: float = 1e-9

# =============================
# 训练相关常量
# =============================

# 种子邻域采样半径（像素）
DEFAULT_TRAINING_RADIUS: int = 3

# 使用上一段路径训练时取的像素数
DEFAULT_TRAINING_LENGTH: int = 32

# 最少有效样本数
DEFAULT_MIN_TRAINING_SAMPLES: int = 4

# 直方图分箱数与高斯平滑 sigma
DEFAULT_HISTOGRAM_BINS: int = 64
DEFAULT_HISTOGRAM_SIGMA: float = 1.0
