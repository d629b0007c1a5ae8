#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
核心模块

会话配置、终止控制、socket节点、角色基类和通用会话循环。
"""

from .config import Config, SessionConfig, TransportConfig, LoggingConfig, load_config
from .termination import TerminationController
from .base import ZMQNode, BaseRole, BaseSender, BaseReceiver, StepResult
from .session import PatternSession, Completed, Failed

__all__ = [
    "Config",
    "SessionConfig",
    "TransportConfig",
    "LoggingConfig",
    "load_config",
    "TerminationController",
    "ZMQNode",
    "BaseRole",
    "BaseSender",
    "BaseReceiver",
    "StepResult",
    "PatternSession",
    "Completed",
    "Failed",
]
