#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试模块

包含zmqcat的单元测试和集成测试，覆盖会话循环、六种消息角色和命令行入口。
"""

import socket
import threading
import time
from typing import List, Optional

from zmqcat.core.config import TransportConfig

# 测试配置
TEST_CONFIG = {
    'poll_interval_ms': 20,      # 测试中缩短轮询间隔
    'reply_timeout_ms': 500,     # 测试中缩短应答等待
    'connect_grace_ms': 300,     # 给订阅者/拉取者足够的连接时间
    'join_timeout': 10.0,        # 等待会话线程结束的最长时间（秒）
}


def get_free_port() -> int:
    """获取一个空闲的TCP端口"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def get_test_address(port: Optional[int] = None) -> str:
    """获取回环测试地址，未指定端口时分配一个空闲端口"""
    return f"tcp://127.0.0.1:{port or get_free_port()}"


def get_test_transport(**overrides) -> TransportConfig:
    """获取测试用的传输配置"""
    values = {
        'poll_interval_ms': TEST_CONFIG['poll_interval_ms'],
        'reply_timeout_ms': TEST_CONFIG['reply_timeout_ms'],
        'connect_grace_ms': TEST_CONFIG['connect_grace_ms'],
        'linger': 1000,
    }
    values.update(overrides)
    return TransportConfig(**values)


def wait_until(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    """轮询等待条件成立"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class SessionThread(threading.Thread):
    """在后台线程中运行会话并保存结果"""

    def __init__(self, session):
        super().__init__(daemon=True)
        self.session = session
        self.outcome = None

    def run(self):
        self.outcome = self.session.run()


class FakeNode:
    """内存中的socket节点，用于角色单元测试"""

    def __init__(self, inbox: Optional[List[str]] = None, writable: bool = True):
        self.inbox = list(inbox or [])
        self.sent: List[str] = []
        self.subscriptions: List[str] = []
        self.options = {}
        self.writable = writable
        self.receive_timeouts: List[int] = []

    def subscribe(self, topic: str) -> None:
        self.subscriptions.append(topic)

    def setsockopt(self, option: int, value) -> None:
        self.options[option] = value

    def send_frame(self, message: str, timeout_ms: Optional[int] = None) -> bool:
        if not self.writable:
            return False
        self.sent.append(message)
        return True

    def try_receive_frame(self, timeout_ms: int) -> Optional[str]:
        self.receive_timeouts.append(timeout_ms)
        if self.inbox:
            return self.inbox.pop(0)
        return None


__all__ = [
    'TEST_CONFIG',
    'get_free_port',
    'get_test_address',
    'get_test_transport',
    'wait_until',
    'SessionThread',
    'FakeNode',
]
