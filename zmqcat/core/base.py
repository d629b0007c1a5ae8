#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
基础类模块

定义socket节点（对pyzmq的薄封装）以及所有消息角色的基类和通用接口。
"""

import enum
import threading
from abc import ABC, abstractmethod
from typing import Optional

import zmq
from typeguard import typechecked

from ..exceptions.base import ConnectionError, MessageError
from ..io.bridge import END_OF_INPUT
from ..logging.logger import get_logger
from ..logging.reporter import StatusReporter
from .config import SessionConfig, TransportConfig

logger = get_logger(__name__)


class ZMQNode:
    """ZeroMQ节点

    一个会话独占一个节点（一个socket）。绑定或连接二选一，
    接收和发送都是有界等待。
    """

    def __init__(self,
                 socket_type: int,
                 address: str,
                 bind: bool = False,
                 transport: Optional[TransportConfig] = None,
                 context: Optional[zmq.Context] = None):
        """
        初始化ZeroMQ节点

        Args:
            socket_type: ZeroMQ socket类型
            address: 绑定或连接的地址，原样传给pyzmq
            bind: 是否绑定地址（True为监听，False为连接）
            transport: 传输配置
            context: 外部提供的上下文（例如inproc测试），为None时自行创建
        """
        self.socket_type = socket_type
        self.address = address
        self.bind = bind
        self.transport = transport or TransportConfig()

        self.context: Optional[zmq.Context] = context
        self.socket: Optional[zmq.Socket] = None
        self._owns_context = context is None

        self._lock = threading.RLock()

        logger.debug(f"初始化ZMQ节点: 类型 {socket_type}, 地址: {address}")

    @property
    def mode(self) -> str:
        return "bind" if self.bind else "connect"

    def open(self) -> None:
        """创建socket并绑定或连接

        Raises:
            ConnectionError: 地址无法解析、端口被占用、权限不足等
        """
        with self._lock:
            if self.socket is not None:
                logger.warning(f"节点已打开: {self.address}")
                return

            try:
                if self.context is None:
                    self.context = zmq.Context(io_threads=self.transport.io_threads)

                self.socket = self.context.socket(self.socket_type)
                self.socket.setsockopt(zmq.LINGER, self.transport.linger)
                self.socket.setsockopt(zmq.SNDHWM, self.transport.high_water_mark)
                self.socket.setsockopt(zmq.RCVHWM, self.transport.high_water_mark)

                if self.bind:
                    self.socket.bind(self.address)
                    logger.info(f"绑定地址: {self.address}")
                else:
                    self.socket.connect(self.address)
                    logger.info(f"连接地址: {self.address}")

            except zmq.ZMQError as e:
                logger.error(f"{self.mode}失败: {e}")
                self.close(linger=0)
                raise ConnectionError(f"Failed to {self.mode}: {e}", address=self.address)

    def close(self, linger: Optional[int] = None) -> None:
        """关闭socket，并终止自行创建的上下文

        Args:
            linger: 关闭时等待未发送消息的时间（毫秒），None表示使用配置的linger；
                0表示丢弃未发送的消息（包括尚未送达的订阅帧），上下文立即终止
        """
        with self._lock:
            if self.socket is not None:
                self.socket.close(linger=linger)
                self.socket = None

            if self.context is not None and self._owns_context:
                self.context.term()
                self.context = None

    def is_open(self) -> bool:
        return self.socket is not None

    def _ensure_open(self) -> zmq.Socket:
        if not self.is_open():
            raise ConnectionError("节点未打开", address=self.address)
        return self.socket

    def setsockopt(self, option: int, value) -> None:
        """设置socket选项"""
        socket = self._ensure_open()
        try:
            socket.setsockopt(option, value)
        except zmq.ZMQError as e:
            raise ConnectionError(f"设置socket选项失败: {e}", address=self.address)

    @typechecked
    def subscribe(self, topic: str) -> None:
        """订阅主题前缀，空字符串表示订阅全部消息"""
        self.setsockopt(zmq.SUBSCRIBE, topic.encode('utf-8'))
        logger.debug(f"订阅主题: '{topic}'")

    @typechecked
    def send_frame(self, message: str, timeout_ms: Optional[int] = None) -> bool:
        """发送一帧消息

        Args:
            message: 消息内容
            timeout_ms: 等待可写的时间（毫秒），None表示一直等待

        Returns:
            bool: 是否已发送；超时未能发送时返回False

        Raises:
            MessageError: 传输层错误
        """
        socket = self._ensure_open()
        data = message.encode('utf-8')

        try:
            if timeout_ms is None:
                socket.send(data)
                return True

            if not socket.poll(timeout_ms, zmq.POLLOUT):
                return False
            socket.send(data, zmq.NOBLOCK)
            return True

        except zmq.Again:
            return False
        except zmq.ZMQError as e:
            logger.error(f"发送消息失败: {e}")
            raise MessageError(f"Send failed: {e}", operation="send")

    def try_receive_frame(self, timeout_ms: int) -> Optional[str]:
        """有界等待接收一帧消息

        Args:
            timeout_ms: 等待时间（毫秒）

        Returns:
            Optional[str]: 消息内容（按UTF-8解码，非法字节替换），超时返回None

        Raises:
            MessageError: 传输层错误
        """
        socket = self._ensure_open()

        try:
            if not socket.poll(timeout_ms, zmq.POLLIN):
                return None
            data = socket.recv(zmq.NOBLOCK)
        except zmq.Again:
            return None
        except zmq.ZMQError as e:
            logger.error(f"接收消息失败: {e}")
            raise MessageError(f"Receive failed: {e}", operation="receive")

        return data.decode('utf-8', errors='replace')


class StepResult(enum.Enum):
    """单次循环步骤的结果"""
    HANDLED = "handled"            # 处理了一条应用消息，计数加一
    IDLE = "idle"                  # 暂无消息或等待超时
    END_OF_INPUT = "end_of_input"  # 标准输入结束


class BaseRole(ABC):
    """消息角色基类

    会话循环在绑定/连接之后调用setup()，之后反复调用step()，
    结束时用summary()生成摘要。
    """

    name: str = ""
    socket_type: Optional[int] = None
    needs_grace: bool = False
    # 正常结束时是否按配置的linger等待已发送的消息送达；否则关闭时丢弃
    flush_on_close: bool = False

    @typechecked
    def __init__(self,
                 config: SessionConfig,
                 transport: Optional[TransportConfig] = None,
                 reporter: Optional[StatusReporter] = None):
        """
        初始化角色

        Args:
            config: 会话配置
            transport: 传输配置
            reporter: 状态报告器
        """
        if self.socket_type is None:
            raise ValueError("必须指定socket_type")

        self.config = config
        self.transport = transport or TransportConfig()
        self.reporter = reporter or StatusReporter(verbose=config.verbose, quiet=config.quiet)

    def setup(self, node: ZMQNode) -> None:
        """绑定/连接之后的角色专属设置"""
        pass

    @abstractmethod
    def describe(self) -> str:
        """会话开始时的生命周期信息"""
        pass

    @abstractmethod
    def step(self, node: ZMQNode, bridge) -> StepResult:
        """执行一次循环步骤"""
        pass

    @abstractmethod
    def summary(self, count: int) -> str:
        """会话结束时的摘要"""
        pass


class BaseSender(BaseRole):
    """发送角色基类

    从标准输入读取一行并发送。发送端暂时不可写（例如PUSH/REQ尚无对端）时，
    保留这一行，下一步重试，以便循环能及时响应取消。
    """

    flush_on_close = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._pending: Optional[str] = None

    def prepare(self, line: str) -> str:
        """把输入行转换为待发送消息"""
        return line

    @abstractmethod
    def after_send(self, node: ZMQNode, bridge, message: str) -> StepResult:
        """消息发出之后的处理"""
        pass

    def step(self, node: ZMQNode, bridge) -> StepResult:
        poll_interval = self.transport.poll_interval_ms

        if self._pending is None:
            line = bridge.read_line(timeout=poll_interval / 1000.0)
            if line is END_OF_INPUT:
                return StepResult.END_OF_INPUT
            if line is None:
                return StepResult.IDLE
            self._pending = self.prepare(line)

        if not node.send_frame(self._pending, timeout_ms=poll_interval):
            return StepResult.IDLE

        message, self._pending = self._pending, None
        return self.after_send(node, bridge, message)


class BaseReceiver(BaseRole):
    """接收角色基类

    有界等待接收一帧消息，收到后交给on_message处理。
    """

    @abstractmethod
    def on_message(self, node: ZMQNode, bridge, message: str) -> StepResult:
        pass

    def step(self, node: ZMQNode, bridge) -> StepResult:
        message = node.try_receive_frame(self.transport.poll_interval_ms)
        if message is None:
            return StepResult.IDLE
        return self.on_message(node, bridge, message)
