#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
状态报告模块

向标准错误输出面向用户的状态行。与内部日志分离：
不带时间戳和级别前缀，也不会传播到zmqcat根记录器。
"""

import logging
import sys


class StatusReporter:
    """状态报告器

    - lifecycle: 会话开始/结束摘要，quiet模式下不输出
    - detail: 逐条消息跟踪，仅在verbose模式下输出
    - warning/error: 诊断信息，总是输出
    """

    def __init__(self, verbose: bool = False, quiet: bool = False, stream=None):
        self.verbose = verbose
        self.quiet = quiet

        # 记录器不注册到logging管理器，随报告器一起释放
        self._logger = logging.Logger("zmqcat.status", logging.INFO)
        self._logger.propagate = False

        self._handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        self._handler.setFormatter(logging.Formatter("%(message)s"))
        self._logger.addHandler(self._handler)

    def lifecycle(self, message: str) -> None:
        if not self.quiet:
            self._logger.info(message)

    def detail(self, message: str) -> None:
        if self.verbose:
            self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def close(self) -> None:
        """释放处理器"""
        self._handler.flush()
        self._logger.removeHandler(self._handler)
