#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
终止控制模块

提供会话的取消令牌：可选的截止时间、外部中断信号和显式取消。
计时器线程和信号处理函数只设置事件标志，从不触碰socket或输入输出流。
"""

import signal
import threading
from typing import Dict, Optional

from ..logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TerminationController:
    """终止控制器

    一个会话对应一个实例。取消后为终态，不会被重置。
    所有查询方法都是非阻塞的。
    """

    def __init__(self):
        self._cancelled = threading.Event()
        self._signalled = threading.Event()
        self._expired = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self._previous_handlers: Dict[int, object] = {}

    def start(self, timeout_seconds: int = 0) -> "TerminationController":
        """启动控制器

        Args:
            timeout_seconds: 截止时间（秒），大于0时启动计时器

        Returns:
            TerminationController: 自身，便于链式调用
        """
        if timeout_seconds > 0 and self._timer is None:
            self._timer = threading.Timer(timeout_seconds, self._on_deadline)
            self._timer.daemon = True
            self._timer.start()
            logger.debug(f"设置截止时间: {timeout_seconds}秒")
        return self

    def install_signal_handlers(self, signals=DEFAULT_SIGNALS) -> None:
        """安装信号处理函数

        只能在主线程中安装；其他线程中调用时忽略。
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("非主线程，跳过信号处理函数安装")
            return

        for signum in signals:
            self._previous_handlers[signum] = signal.signal(signum, self._on_signal)

    def stop(self) -> None:
        """撤销计时器并恢复原有的信号处理函数"""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def interrupt(self) -> None:
        """记录一次外部中断并取消"""
        self._signalled.set()
        self._cancelled.set()

    def cancel(self) -> None:
        """显式取消"""
        self._cancelled.set()

    def signalled(self) -> bool:
        """是否收到外部中断"""
        return self._signalled.is_set()

    def expired(self) -> bool:
        """截止时间是否已到"""
        return self._expired.is_set()

    def cancelled(self) -> bool:
        """是否已取消（截止时间、外部中断或显式取消）"""
        return self._cancelled.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """等待取消，返回是否已取消"""
        return self._cancelled.wait(timeout)

    def _on_deadline(self) -> None:
        self._expired.set()
        self._cancelled.set()

    def _on_signal(self, signum, frame) -> None:
        self.interrupt()
