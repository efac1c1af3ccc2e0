#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
父节点表测试
"""

import pytest

from livewire.common.exceptions import OutOfBoundsError, SessionStateError
from livewire.core import ParentMap


def test_finalize_and_get():
    """确定后的记录可以读回"""
    parent_map = ParentMap(3, 2)
    assert parent_map.Get((1, 1)) is None

    parent_map.Finalize((0, 0), None, 0.0)
    parent_map.Finalize((1, 1), (0, 0), 0.5)

    entry = parent_map.Get((1, 1))
    assert entry.pixel == (1, 1)
    assert entry.parent == (0, 0)
    assert entry.cost == pytest.approx(0.5)
    assert parent_map.Parent((0, 0)) is None
    assert parent_map.FinalizedCount == 2


def test_double_finalize_raises():
    """同一像素不能确定两次"""
    parent_map = ParentMap(3, 3)
    parent_map.Finalize((1, 1), None, 0.0)
    with pytest.raises(SessionStateError):
        parent_map.Finalize((1, 1), None, 0.0)
    assert parent_map.FinalizedCount == 1


def test_index_round_trip_and_bounds():
    """行优先下标与像素互相转换，越界抛出 OutOfBoundsError"""
    parent_map = ParentMap(4, 3)
    assert parent_map.Index((3, 2)) == 11
    assert parent_map.PixelAt(6) == (2, 1)
    with pytest.raises(OutOfBoundsError):
        parent_map.Index((4, 0))
    with pytest.raises(OutOfBoundsError):
        parent_map.IsFinalized((0, -1))
