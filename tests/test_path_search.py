#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
可恢复路径搜索测试
"""

import math

import numpy as np
import pytest

from livewire.core import CostModel, PathSearch, Raster, SearchState, Trainer, compute_features


def _Search(data, seed, mask=None):
    height, width = data.shape
    features = compute_features(Raster.FromBuffer(width, height, data.ravel(), mask))
    weights = Trainer().Train(seed, features)
    model = CostModel(features, weights)
    return PathSearch(model, seed), model


def _BellmanFord(model, seed):
    """暴力松弛所有链接直到收敛，作为最优代价的参照"""
    dist = np.full((model.height, model.width), math.inf)
    dist[seed[1], seed[0]] = 0.0
    changed = True
    while changed:
        changed = False
        for y in range(model.height):
            for x in range(model.width):
                if dist[y, x] == math.inf:
                    continue
                for (nx, ny), cost in model.Neighbors((x, y)):
                    if dist[y, x] + cost < dist[ny, nx] - 1e-12:
                        dist[ny, nx] = dist[y, x] + cost
                        changed = True
    return dist


def _RunToExhaustion(search, budget=7):
    entries = []
    while True:
        batch = search.Step(budget)
        if not batch:
            break
        entries.extend(batch)
    return entries


def test_finalized_costs_are_optimal(random_raster):
    """确定像素的代价等于暴力求得的最小路径代价，且父链代价一致"""
    search, model = _Search(random_raster, (2, 3))
    _RunToExhaustion(search)
    dist = _BellmanFord(model, (2, 3))

    height, width = random_raster.shape
    for y in range(height):
        for x in range(width):
            entry = search.parent_map.Get((x, y))
            assert entry is not None
            assert entry.cost == pytest.approx(dist[y, x])
            if entry.parent is not None:
                parent = search.parent_map.Get(entry.parent)
                dx, dy = x - entry.parent[0], y - entry.parent[1]
                link = dict(model.Neighbors(entry.parent))[(x, y)]
                assert entry.cost == pytest.approx(parent.cost + link)
                assert max(abs(dx), abs(dy)) == 1


def test_step_respects_budget_and_starts_at_seed(random_raster):
    """第一批从种子开始，每批不超过预算"""
    search, _ = _Search(random_raster, (0, 0))
    assert search.State is SearchState.IDLE

    first = search.Step(5)
    assert len(first) == 5
    assert first[0].pixel == (0, 0)
    assert first[0].parent is None
    assert first[0].cost == 0.0
    assert search.State is SearchState.SEARCHING
    assert search.Step(0) == []


def test_set_target_does_not_advance(random_raster):
    """设置目标不推进搜索"""
    search, _ = _Search(random_raster, (1, 1))
    search.SetTarget((4, 5))
    assert search.target == (4, 5)
    assert search.parent_map.FinalizedCount == 0
    assert not search.IsTargetReached()

    assert search.RunUntilTarget(3)
    assert search.IsTargetReached()


def test_finalization_is_monotonic(random_raster):
    """已确定像素的记录之后不再改变，确定顺序的代价单调不减"""
    search, _ = _Search(random_raster, (3, 3))
    seen = {}
    previous_cost = -1.0
    while True:
        batch = search.Step(3)
        if not batch:
            break
        for entry in batch:
            assert entry.pixel not in seen
            assert entry.cost >= previous_cost - 1e-12
            previous_cost = entry.cost
            seen[entry.pixel] = entry
        for pixel, entry in seen.items():
            assert search.parent_map.Get(pixel) == entry

    assert len(seen) == random_raster.size


def test_exhausted_search_is_idempotent(uniform5):
    """前沿耗尽后再次 Step 返回空且状态不变"""
    search, _ = _Search(uniform5, (2, 2))
    _RunToExhaustion(search)
    assert search.State is SearchState.EXHAUSTED

    before = search.parent_map.Snapshot()
    assert search.Step(100) == []
    after = search.parent_map.Snapshot()

    assert search.State is SearchState.EXHAUSTED
    for key in before:
        assert np.array_equal(before[key], after[key])


def test_isolated_target_is_unreachable():
    """被不可通行像素包围的目标在前沿耗尽后仍未确定"""
    data = np.full((5, 5), 3.0)
    mask = np.ones((5, 5), dtype=bool)
    mask[3, 3] = mask[3, 4] = mask[4, 3] = False
    search, _ = _Search(data, (0, 0), mask)
    search.SetTarget((4, 4))

    assert not search.RunUntilTarget(4)
    assert search.IsTargetUnreachable()
    assert search.parent_map.FinalizedCount == 21
