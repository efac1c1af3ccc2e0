#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
公共模块：常量与异常定义
"""
