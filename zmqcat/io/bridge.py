#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
输入输出桥接模块

按行读取标准输入（发送角色）并按行写入标准输出（接收角色）。
"""

import queue
import sys
import threading
from typing import Optional, Union

from ..exceptions.base import MessageError
from ..logging.logger import get_logger

logger = get_logger(__name__)


class _EndOfInput:
    """输入结束标记"""

    def __repr__(self) -> str:
        return "END_OF_INPUT"


END_OF_INPUT = _EndOfInput()


def strip_newline(line: str) -> str:
    """去掉一个行尾换行符（\\n 或 \\r\\n）"""
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith('\n'):
        return line[:-1]
    return line


class IOBridge:
    """输入输出桥接器

    读取由后台守护线程按需完成：只有在调用read_line()时才读取下一行，
    因此不会预读输入；等待输入期间调用方仍可按超时返回并检查取消状态。
    """

    def __init__(self, input_stream=None, output_stream=None):
        """
        初始化桥接器

        Args:
            input_stream: 输入流（文本或字节），默认为sys.stdin的字节流
            output_stream: 输出流，默认为sys.stdout
        """
        self._input = input_stream if input_stream is not None else getattr(sys.stdin, "buffer", sys.stdin)
        self._output = output_stream if output_stream is not None else sys.stdout

        self._lines: "queue.Queue[Union[str, _EndOfInput, BaseException]]" = queue.Queue()
        self._wanted = threading.Event()
        self._requested = False
        self._eof = False
        self._reader: Optional[threading.Thread] = None

    def _ensure_reader(self) -> None:
        if self._reader is None:
            self._reader = threading.Thread(target=self._read_loop, name="zmqcat-stdin", daemon=True)
            self._reader.start()

    def _read_loop(self) -> None:
        """后台读取循环，每次请求读取一行"""
        while True:
            self._wanted.wait()
            self._wanted.clear()

            try:
                line = self._input.readline()
            except (OSError, ValueError) as e:
                self._lines.put(e)
                return

            if not line:
                self._lines.put(END_OF_INPUT)
                return
            if isinstance(line, bytes):
                line = line.decode("utf-8", errors="replace")
            self._lines.put(strip_newline(line))

    def read_line(self, timeout: Optional[float] = None) -> Union[str, _EndOfInput, None]:
        """读取下一行

        Args:
            timeout: 等待时间（秒），None表示一直等待

        Returns:
            去掉换行符的一行；输入结束时返回END_OF_INPUT；超时返回None

        Raises:
            MessageError: 读取输入失败
        """
        if self._eof:
            return END_OF_INPUT

        self._ensure_reader()
        if not self._requested:
            self._requested = True
            self._wanted.set()

        try:
            item = self._lines.get(timeout=timeout)
        except queue.Empty:
            return None

        self._requested = False

        if isinstance(item, BaseException):
            self._eof = True
            logger.error(f"读取输入失败: {item}")
            raise MessageError(f"Failed to read input: {item}", operation="read")

        if item is END_OF_INPUT:
            self._eof = True
            logger.debug("输入结束")

        return item

    def write_line(self, line: str) -> None:
        """写入一行并立即刷新"""
        self._output.write(line + "\n")
        self._output.flush()
