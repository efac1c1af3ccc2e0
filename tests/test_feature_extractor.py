#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
特征提取测试
"""

import numpy as np

from livewire.core import Raster, compute_features


def test_flat_raster_has_maximum_cost(uniform5):
    """平坦栅格：梯度代价和过零点代价都取最大值，方向向量为零"""
    features = compute_features(Raster.FromBuffer(5, 5, uniform5.ravel()))

    assert np.all(features.gradient_cost == 1.0)
    assert np.all(features.laplace_cost == 1.0)
    assert np.all(features.unit_x == 0.0)
    assert np.all(features.unit_y == 0.0)
    assert not features.blocked.any()


def test_step_edge_zero_crossing_and_gradient():
    """竖直阶跃边缘：边缘两侧为过零点，前向差分梯度落在暗侧一列"""
    data = np.zeros((6, 6))
    data[:, 3:] = 100.0
    features = compute_features(Raster.FromBuffer(6, 6, data.ravel()))

    crossing_columns = set(np.argwhere(features.laplace_cost == 0.0)[:, 1].tolist())
    assert crossing_columns == {2, 3}
    assert np.all(features.gradient_cost[:, 2] == 0.0)
    assert np.all(features.gradient_cost[:, [0, 1, 3, 4, 5]] == 1.0)
    # 梯度沿 +x，边缘方向为 (0, -1)
    assert np.allclose(features.unit_x[:, 2], 0.0)
    assert np.allclose(features.unit_y[:, 2], -1.0)


def test_intensity_is_normalized(random_raster):
    """强度归一化到 [0,1]"""
    height, width = random_raster.shape
    features = compute_features(Raster.FromBuffer(width, height, random_raster.ravel()))

    assert features.intensity.min() == 0.0
    assert features.intensity.max() == 1.0
    assert features.shape == (height, width)
    assert np.all((features.gradient_magnitude >= 0.0) & (features.gradient_magnitude <= 1.0))


def test_non_finite_samples_are_blocked():
    """NaN 样本和掩码为 False 的像素不可通行"""
    data = np.arange(16, dtype=np.float64)
    data[5] = np.nan
    mask = np.ones(16, dtype=bool)
    mask[10] = False
    features = compute_features(Raster.FromBuffer(4, 4, data, mask))

    assert features.blocked[1, 1]
    assert features.blocked[2, 2]
    assert int(features.blocked.sum()) == 2
    assert np.isfinite(features.intensity).all()
