#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命令行描边测试
"""

import json

import cv2
import numpy as np
import pytest

from livewire.cli import Main, ParsePoint


@pytest.fixture
def image_path(tmp_path):
    """10x10 均匀灰度图"""
    path = tmp_path / "flat.png"
    cv2.imwrite(str(path), np.full((10, 10), 80, dtype=np.uint8))
    return path


def test_parse_point():
    assert ParsePoint("3,7") == (3, 7)


def test_trace_writes_json(image_path, tmp_path):
    """锚定一个点后在远处结束，输出不闭合的折线"""
    out_path = tmp_path / "out" / "path.json"
    code = Main([str(image_path), "--seed", "0,0", "--point", "4,4", "--point", "8,0",
                 "--output", str(out_path), "--log-level", "WARNING"])

    assert code == 0
    result = json.loads(out_path.read_text(encoding="utf-8"))
    assert result["points"][0] == [0, 0]
    assert result["points"][-1] == [8, 0]
    assert result["control_points"] == [[0, 0], [4, 4]]
    assert result["closed"] is False


def test_trace_closes(image_path, tmp_path):
    """--close 时最后一个点靠近首个种子则闭合"""
    out_path = tmp_path / "closed.json"
    code = Main([str(image_path), "--seed", "0,0", "--point", "6,6", "--point", "8,0",
                 "--point", "1,0", "--close", "--output", str(out_path)])

    assert code == 0
    result = json.loads(out_path.read_text(encoding="utf-8"))
    assert result["closed"] is True
    assert result["points"][-1] == [1, 0]


def test_out_of_bounds_point_fails(image_path):
    """越界点返回错误码"""
    assert Main([str(image_path), "--seed", "0,0", "--point", "20,20"]) == 1


def test_missing_image_fails(tmp_path):
    assert Main([str(tmp_path / "nope.png"), "--seed", "0,0"]) == 1
