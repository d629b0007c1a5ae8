#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志模块

提供内部日志记录功能和面向用户的状态报告器。
"""

from .logger import (
    get_logger,
    configure_logging,
    configure_from_dict,
    set_log_level,
    add_file_handler,
    add_console_handler,
    remove_handler
)
from .reporter import StatusReporter

__all__ = [
    "get_logger",
    "configure_logging",
    "configure_from_dict",
    "set_log_level",
    "add_file_handler",
    "add_console_handler",
    "remove_handler",
    "StatusReporter"
]
