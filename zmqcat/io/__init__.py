#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
输入输出模块

标准输入输出与消息循环之间的按行桥接。
"""

from .bridge import IOBridge, END_OF_INPUT, strip_newline

__all__ = [
    "IOBridge",
    "END_OF_INPUT",
    "strip_newline",
]
