#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
发布-订阅模式实现

提供Publisher（发布者）和Subscriber（订阅者）角色。
每个订阅者都会收到匹配主题前缀的全部消息；发布者没有确认也没有背压。
"""

import zmq
from typeguard import typechecked

from ..core.base import BaseReceiver, BaseSender, StepResult, ZMQNode


@typechecked
def apply_topic(topic: str, line: str) -> str:
    """给发出的行加上主题前缀

    主题为空时原样返回；否则返回 "主题 行"，即使该行已经以同样的前缀开头。

    Args:
        topic: 主题
        line: 输入行

    Returns:
        str: 待发送的消息
    """
    if not topic:
        return line
    return f"{topic} {line}"


class Publisher(BaseSender):
    """发布者角色

    逐行读取标准输入，加上主题前缀后广播。
    """

    name = "pub"
    socket_type = zmq.PUB
    needs_grace = True

    def describe(self) -> str:
        return f"Publishing on {self.config.address} (mode={self.config.mode})"

    def prepare(self, line: str) -> str:
        return apply_topic(self.config.topic, line)

    def after_send(self, node: ZMQNode, bridge, message: str) -> StepResult:
        self.reporter.detail(f"Sent: {message}")
        return StepResult.HANDLED

    def summary(self, count: int) -> str:
        return f"Published {count} messages"


class Subscriber(BaseReceiver):
    """订阅者角色

    按主题前缀订阅（空主题订阅全部），把收到的消息逐行写到标准输出。
    """

    name = "sub"
    socket_type = zmq.SUB

    def setup(self, node: ZMQNode) -> None:
        # 前缀匹配由传输层完成
        node.subscribe(self.config.topic)

    def describe(self) -> str:
        return (f"Subscribed to {self.config.address} "
                f"(topic='{self.config.topic}', mode={self.config.mode})")

    def on_message(self, node: ZMQNode, bridge, message: str) -> StepResult:
        bridge.write_line(message)
        return StepResult.HANDLED

    def summary(self, count: int) -> str:
        return f"Received {count} messages"
