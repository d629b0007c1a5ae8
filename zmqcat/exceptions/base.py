#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
异常基类模块

定义zmqcat中使用的所有异常类。
"""

from typing import Optional, Any


class ZmqCatError(Exception):
    """zmqcat的基础异常类

    所有zmqcat相关的异常都应该继承自这个类。
    """

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Any] = None):
        """
        初始化异常

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 错误详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code}', details={self.details})"


class ConnectionError(ZmqCatError):
    """连接相关异常

    当socket绑定或连接失败时抛出（地址无法解析、端口被占用、权限不足等）。
    """

    def __init__(self, message: str, address: Optional[str] = None, **kwargs):
        """
        初始化连接异常

        Args:
            message: 错误消息
            address: 连接地址
        """
        super().__init__(message, error_code="CONNECTION_ERROR", details=kwargs or None)
        self.address = address

    def __str__(self) -> str:
        if self.address:
            return f"{self.message} ({self.address})"
        return self.message


class MessageError(ZmqCatError):
    """消息相关异常

    当循环内发送或接收消息失败时抛出。
    """

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="MESSAGE_ERROR", details=kwargs or None)
        self.operation = operation


class TimeoutError(ZmqCatError):
    """超时相关异常"""

    def __init__(self, message: str, timeout: Optional[int] = None, operation: Optional[str] = None, **kwargs):
        """
        初始化超时异常

        Args:
            message: 错误消息
            timeout: 超时时间（毫秒）
            operation: 超时的操作
        """
        super().__init__(message, error_code="TIMEOUT_ERROR", details=kwargs or None)
        self.timeout = timeout
        self.operation = operation


class ConfigurationError(ZmqCatError):
    """配置相关异常

    未知命令、配置文件无法读取等情况下抛出。
    """

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=kwargs or None)
        self.config_key = config_key

