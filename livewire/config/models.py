#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
live-wire 配置模型

使用Pydantic定义类型安全的配置模型，所有字段都有默认值，可只覆盖部分参数。
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..common.constants import (
    DEFAULT_LAPLACE_WEIGHT,
    DEFAULT_GRADIENT_WEIGHT,
    DEFAULT_DIRECTION_WEIGHT,
    DEFAULT_TRAINED_STATIC_WEIGHT,
    DEFAULT_TRAINED_DYNAMIC_WEIGHT,
    DEFAULT_TRAINING_RADIUS,
    DEFAULT_TRAINING_LENGTH,
    DEFAULT_MIN_TRAINING_SAMPLES,
    DEFAULT_HISTOGRAM_BINS,
    DEFAULT_HISTOGRAM_SIGMA,
    DEFAULT_STEP_BUDGET,
    DEFAULT_CLOSE_TOLERANCE,
)


class CostConfig(BaseModel):
    """链接代价配置"""
    laplace_weight: float = Field(DEFAULT_LAPLACE_WEIGHT, description="拉普拉斯过零点特征权重")
    gradient_weight: float = Field(DEFAULT_GRADIENT_WEIGHT, description="梯度幅值特征权重")
    direction_weight: float = Field(DEFAULT_DIRECTION_WEIGHT, description="梯度方向特征权重")
    trained_static_weight: float = Field(
        DEFAULT_TRAINED_STATIC_WEIGHT,
        description="训练后静态代价所占权重"
    )
    trained_dynamic_weight: float = Field(
        DEFAULT_TRAINED_DYNAMIC_WEIGHT,
        description="训练后动态代价所占权重"
    )

    @field_validator('laplace_weight', 'gradient_weight', 'direction_weight')
    @classmethod
    def validate_feature_weight(cls, v: float) -> float:
        """验证特征权重非负"""
        if v < 0:
            raise ValueError(f"特征权重不能为负数: {v}")
        return v

    @field_validator('trained_static_weight', 'trained_dynamic_weight')
    @classmethod
    def validate_blend_weight(cls, v: float) -> float:
        """验证混合权重范围"""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"混合权重必须在0.0-1.0之间: {v}")
        return v

    @model_validator(mode='after')
    def validate_weight_sum(self) -> 'CostConfig':
        """静态特征权重之和必须大于0"""
        total = self.laplace_weight + self.gradient_weight + self.direction_weight
        if total <= 0:
            raise ValueError("静态特征权重之和必须大于0")
        return self


class TrainingConfig(BaseModel):
    """动态训练配置"""
    enabled: bool = Field(True, description="是否在种子/锚点处训练动态代价")
    radius: int = Field(DEFAULT_TRAINING_RADIUS, description="种子邻域采样半径（像素）")
    segment_length: int = Field(DEFAULT_TRAINING_LENGTH, description="上一段路径用于训练的像素数")
    min_samples: int = Field(DEFAULT_MIN_TRAINING_SAMPLES, description="最少有效样本数")
    histogram_bins: int = Field(DEFAULT_HISTOGRAM_BINS, description="特征直方图分箱数")
    histogram_sigma: float = Field(DEFAULT_HISTOGRAM_SIGMA, description="直方图高斯平滑sigma（分箱单位）")

    @field_validator('radius', 'segment_length', 'min_samples')
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """验证正整数"""
        if v <= 0:
            raise ValueError(f"值必须大于0: {v}")
        return v

    @field_validator('histogram_bins')
    @classmethod
    def validate_bins(cls, v: int) -> int:
        """验证分箱数"""
        if v < 2:
            raise ValueError(f"直方图分箱数至少为2: {v}")
        return v

    @field_validator('histogram_sigma')
    @classmethod
    def validate_sigma(cls, v: float) -> float:
        """验证平滑系数"""
        if v < 0:
            raise ValueError(f"平滑sigma不能为负数: {v}")
        return v


class SearchConfig(BaseModel):
    """路径搜索配置"""
    step_budget: int = Field(DEFAULT_STEP_BUDGET, description="每次Step最多确定的像素数")
    close_tolerance: int = Field(DEFAULT_CLOSE_TOLERANCE, description="闭合路径的像素容差")

    @field_validator('step_budget', 'close_tolerance')
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """验证正整数"""
        if v <= 0:
            raise ValueError(f"值必须大于0: {v}")
        return v


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = Field("INFO", description="日志级别")
    log_dir: Optional[str] = Field(None, description="日志文件目录，None表示只输出到控制台")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """验证日志级别"""
        valid = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in valid:
            raise ValueError(f"无效的日志级别: {v}")
        return level


class LiveWireConfig(BaseModel):
    """live-wire 引擎总配置"""
    cost: CostConfig = Field(default_factory=CostConfig, description="链接代价配置")
    training: TrainingConfig = Field(default_factory=TrainingConfig, description="动态训练配置")
    search: SearchConfig = Field(default_factory=SearchConfig, description="路径搜索配置")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="日志配置")
