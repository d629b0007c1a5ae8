#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
请求-应答模式实现

提供Requester（请求者）和Replier（应答者）角色，实现严格同步的一问一答。
"""

import zmq

from ..core.base import BaseReceiver, BaseSender, StepResult, ZMQNode
from ..exceptions.base import TimeoutError
from ..logging.logger import get_logger

logger = get_logger(__name__)

REQUEST_PREFIX = "Received: "
REPLY_PREFIX = "Echo: "


def make_reply(request: str) -> str:
    """生成回显应答"""
    return f"{REPLY_PREFIX}{request}"


class Requester(BaseSender):
    """请求者角色

    每读取一行就发送一个请求，并等待应答（等待时间较长）。
    等待超时只报告诊断信息，继续处理下一行，不计数。
    """

    name = "req"
    socket_type = zmq.REQ

    def setup(self, node: ZMQNode) -> None:
        # 超时后允许发送下一个请求，并丢弃迟到的旧应答
        node.setsockopt(zmq.REQ_RELAXED, 1)
        node.setsockopt(zmq.REQ_CORRELATE, 1)

    def describe(self) -> str:
        return f"Requester connected to {self.config.address} (mode={self.config.mode})"

    def after_send(self, node: ZMQNode, bridge, message: str) -> StepResult:
        self.reporter.detail(f"Sent: {message}")

        reply = node.try_receive_frame(self.transport.reply_timeout_ms)
        if reply is None:
            logger.debug(f"等待应答超时: {self.transport.reply_timeout_ms}ms")
            self.reporter.warning("Timeout waiting for reply")
            return StepResult.IDLE

        bridge.write_line(reply)
        return StepResult.HANDLED

    def summary(self, count: int) -> str:
        return f"Sent/received {count} request-reply pairs"


class Replier(BaseReceiver):
    """应答者角色

    收到请求后写到标准输出，并在接收下一个请求之前发送一个回显应答。
    """

    name = "rep"
    socket_type = zmq.REP
    flush_on_close = True

    def describe(self) -> str:
        return f"Replier listening on {self.config.address} (mode={self.config.mode})"

    def on_message(self, node: ZMQNode, bridge, message: str) -> StepResult:
        bridge.write_line(f"{REQUEST_PREFIX}{message}")

        reply = make_reply(message)
        if not node.send_frame(reply, timeout_ms=self.transport.reply_timeout_ms):
            raise TimeoutError("Timed out sending reply",
                               timeout=self.transport.reply_timeout_ms,
                               operation="reply")

        self.reporter.detail(f"Replied: {reply}")
        return StepResult.HANDLED

    def summary(self, count: int) -> str:
        return f"Handled {count} requests"
