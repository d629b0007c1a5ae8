#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
模式会话模块

所有角色共用的会话循环：绑定或连接、角色设置、循环直到取消、
输入结束或达到消息数量上限，最后返回带类型的结果而不是直接退出进程。
"""

from typing import Optional, Union

import zmq
from pydantic import BaseModel, ConfigDict

from ..exceptions.base import ZmqCatError
from ..io.bridge import IOBridge
from ..logging.logger import get_logger
from ..logging.reporter import StatusReporter
from .base import BaseRole, StepResult, ZMQNode
from .config import SessionConfig, TransportConfig
from .termination import TerminationController

logger = get_logger(__name__)

CANCELLED = "cancelled"
END_OF_INPUT = "end_of_input"
LIMIT_REACHED = "limit_reached"


class Completed(BaseModel):
    """会话正常结束"""
    model_config = ConfigDict(frozen=True)

    count: int
    reason: str


class Failed(BaseModel):
    """会话因设置或传输错误结束"""
    model_config = ConfigDict(frozen=True)

    reason: str
    count: int = 0


Outcome = Union[Completed, Failed]


class PatternSession:
    """模式会话

    一次调用对应一个会话，会话独占一个socket。
    取消令牌由调用方传入，会话本身不读取任何全局状态。
    """

    def __init__(self,
                 role: BaseRole,
                 token: TerminationController,
                 bridge: Optional[IOBridge] = None,
                 reporter: Optional[StatusReporter] = None,
                 context: Optional[zmq.Context] = None):
        """
        初始化会话

        Args:
            role: 消息角色
            token: 取消令牌
            bridge: 输入输出桥接器
            reporter: 状态报告器，默认使用角色的报告器
            context: 外部提供的ZeroMQ上下文
        """
        self.role = role
        self.config: SessionConfig = role.config
        self.transport: TransportConfig = role.transport
        self.token = token
        self.bridge = bridge or IOBridge()
        self.reporter = reporter or role.reporter
        self.context = context
        self.count = 0

    def run(self) -> Outcome:
        """运行会话直到结束

        Returns:
            Outcome: Completed(count, reason) 或 Failed(reason, count)
        """
        self.token.start(self.config.timeout_seconds)

        node = ZMQNode(self.role.socket_type,
                       self.config.address,
                       bind=self.config.bind,
                       transport=self.transport,
                       context=self.context)

        try:
            node.open()
            self.role.setup(node)
        except ZmqCatError as e:
            node.close(linger=0)
            return self._fail(e)

        reason = CANCELLED
        try:
            self.reporter.lifecycle(self.role.describe())

            # 给对端建立连接的时间，避免最早的消息被丢弃
            if self.role.needs_grace and self.transport.connect_grace_ms > 0:
                self.token.wait(self.transport.connect_grace_ms / 1000.0)

            reason = self._loop(node)

        except (ZmqCatError, OSError) as e:
            return self._fail(e)
        finally:
            node.close(linger=self._close_linger(reason))

        self.reporter.lifecycle(self.role.summary(self.count))
        self.reporter.detail(f"Stopped: {self._describe_reason(reason)}")
        logger.debug(f"会话结束: {reason}, 消息数: {self.count}")

        return Completed(count=self.count, reason=reason)

    def _loop(self, node: ZMQNode) -> str:
        limit = self.config.message_limit

        while not self.token.cancelled():
            if limit > 0 and self.count >= limit:
                return LIMIT_REACHED

            result = self.role.step(node, self.bridge)
            if result is StepResult.HANDLED:
                self.count += 1
            elif result is StepResult.END_OF_INPUT:
                return END_OF_INPUT

        return CANCELLED

    def _close_linger(self, reason: str) -> Optional[int]:
        """关闭socket时使用的linger

        发送角色在输入结束或达到上限时保留配置的linger，让最后几条消息送达；
        取消、失败以及只接收的角色立即关闭，保证在截止时间后一个轮询间隔内返回。
        """
        if self.role.flush_on_close and reason != CANCELLED:
            return None
        return 0

    def _fail(self, error: Exception) -> Failed:
        logger.error(f"会话失败: {error!r}")
        self.reporter.error(f"Error: {error}")
        return Failed(reason=str(error), count=self.count)

    def _describe_reason(self, reason: str) -> str:
        if reason == END_OF_INPUT:
            return "end of input"
        if reason == LIMIT_REACHED:
            return f"message limit reached ({self.config.message_limit})"
        if self.token.signalled():
            return "interrupted"
        if self.token.expired():
            return f"timeout reached ({self.config.timeout_seconds}s)"
        return "cancelled"
