#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
推送-拉取模式实现

提供Pusher（推送者）和Puller（拉取者）角色。
对端的轮询分发由传输层负责，这里不做选择。
"""

import zmq

from ..core.base import BaseReceiver, BaseSender, StepResult, ZMQNode


class Pusher(BaseSender):
    """推送者角色

    逐行读取标准输入并推送到流水线。
    """

    name = "push"
    socket_type = zmq.PUSH
    needs_grace = True

    def describe(self) -> str:
        return f"Pushing to {self.config.address} (mode={self.config.mode})"

    def after_send(self, node: ZMQNode, bridge, message: str) -> StepResult:
        self.reporter.detail(f"Pushed: {message}")
        return StepResult.HANDLED

    def summary(self, count: int) -> str:
        return f"Pushed {count} messages"


class Puller(BaseReceiver):
    """拉取者角色"""

    name = "pull"
    socket_type = zmq.PULL

    def describe(self) -> str:
        return f"Pulling from {self.config.address} (mode={self.config.mode})"

    def on_message(self, node: ZMQNode, bridge, message: str) -> StepResult:
        bridge.write_line(message)
        return StepResult.HANDLED

    def summary(self, count: int) -> str:
        return f"Pulled {count} messages"
