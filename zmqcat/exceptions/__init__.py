#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
异常模块

定义zmqcat中使用的各种异常类。
"""

from .base import (
    ZmqCatError,
    ConnectionError,
    MessageError,
    TimeoutError,
    ConfigurationError
)

__all__ = [
    "ZmqCatError",
    "ConnectionError",
    "MessageError",
    "TimeoutError",
    "ConfigurationError"
]
