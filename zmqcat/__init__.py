#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
zmqcat - 标准输入输出与ZeroMQ之间的命令行桥接工具

支持六种消息角色（pub/sub, req/rep, push/pull），
用于在shell管道中测试、调试和演示分布式系统。
"""

__version__ = "1.0.0"
__description__ = "标准输入输出与ZeroMQ socket之间的命令行桥接工具"

from .core.config import Config, SessionConfig, TransportConfig, load_config
from .core.termination import TerminationController
from .core.session import PatternSession, Completed, Failed
from .io.bridge import IOBridge, END_OF_INPUT
from .logging.logger import get_logger, configure_logging
from .logging.reporter import StatusReporter
from .patterns import (
    Publisher,
    Subscriber,
    Requester,
    Replier,
    Pusher,
    Puller,
    apply_topic,
    get_pattern_class,
)
from .exceptions.base import (
    ZmqCatError,
    ConnectionError,
    MessageError,
    TimeoutError,
    ConfigurationError
)

__all__ = [
    "__version__",
    "__description__",

    # 配置
    "Config",
    "SessionConfig",
    "TransportConfig",
    "load_config",

    # 会话
    "TerminationController",
    "PatternSession",
    "Completed",
    "Failed",
    "IOBridge",
    "END_OF_INPUT",

    # 消息角色
    "Publisher",
    "Subscriber",
    "Requester",
    "Replier",
    "Pusher",
    "Puller",
    "apply_topic",
    "get_pattern_class",

    # 日志
    "get_logger",
    "configure_logging",
    "StatusReporter",

    # 异常类
    "ZmqCatError",
    "ConnectionError",
    "MessageError",
    "TimeoutError",
    "ConfigurationError",
]
