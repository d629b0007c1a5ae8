#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志记录器模块

提供可配置的内部日志记录功能，支持控制台和文件输出。
控制台处理器固定写入标准错误，标准输出只用于消息内容。
"""

import logging
import logging.handlers
import sys
from typing import Optional, Dict, Any
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# 全局日志记录器字典
_loggers: Dict[str, logging.Logger] = {}
_handlers: Dict[str, logging.Handler] = {}


def get_logger(name: str = "zmqcat") -> logging.Logger:
    """获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        logging.Logger: 日志记录器实例
    """
    # 确保名称以zmqcat开头
    if name != "zmqcat" and not name.startswith("zmqcat."):
        full_name = f"zmqcat.{name}"
    else:
        full_name = name

    if full_name not in _loggers:
        _loggers[full_name] = logging.getLogger(full_name)

    return _loggers[full_name]


def configure_logging(
    level: str = "WARNING",
    format_string: Optional[str] = None,
    console_output: bool = True,
    file_path: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    stream=None
) -> None:
    """配置zmqcat日志系统

    只配置"zmqcat"根记录器，不修改全局根记录器。

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: 日志格式字符串
        console_output: 是否输出到控制台（标准错误）
        file_path: 日志文件路径
        max_file_size: 日志文件最大大小（字节）
        backup_count: 日志文件备份数量
        stream: 控制台输出流，默认为sys.stderr
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    root = get_logger("zmqcat")
    root.setLevel(_level(level))

    # 清除之前配置的处理器
    for key in list(_handlers):
        remove_handler(_handlers.pop(key))

    if console_output:
        _handlers["console"] = add_console_handler(level=level, format_string=format_string, stream=stream)

    if file_path:
        _handlers["file"] = add_file_handler(
            file_path=file_path,
            level=level,
            format_string=format_string,
            max_file_size=max_file_size,
            backup_count=backup_count
        )

    root.debug(f"日志系统配置完成 - 级别: {level}, 控制台输出: {console_output}, 文件输出: {file_path}")


def configure_from_dict(config: Dict[str, Any]) -> None:
    """从字典配置日志系统

    Args:
        config: 配置字典（与LoggingConfig字段一致）
    """
    configure_logging(
        level=config.get("level", "WARNING"),
        format_string=config.get("format"),
        console_output=config.get("console_output", True),
        file_path=config.get("file_path"),
        max_file_size=config.get("max_file_size", 10 * 1024 * 1024),
        backup_count=config.get("backup_count", 5)
    )


def set_log_level(level: str, logger_name: Optional[str] = None) -> None:
    """设置日志级别

    Args:
        level: 日志级别
        logger_name: 日志记录器名称，None表示zmqcat根记录器
    """
    logger = get_logger(logger_name or "zmqcat")
    logger.setLevel(_level(level))

    for handler in logger.handlers:
        handler.setLevel(_level(level))


def add_file_handler(
    file_path: str,
    level: str = "INFO",
    format_string: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    logger_name: Optional[str] = None
) -> logging.Handler:
    """添加轮转文件处理器

    Returns:
        logging.Handler: 创建的文件处理器
    """
    # 确保日志目录存在
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=file_path,
        maxBytes=max_file_size,
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    file_handler.setLevel(_level(level))

    get_logger(logger_name or "zmqcat").addHandler(file_handler)
    return file_handler


def add_console_handler(
    level: str = "INFO",
    format_string: Optional[str] = None,
    stream=None,
    logger_name: Optional[str] = None
) -> logging.Handler:
    """添加控制台处理器

    Args:
        level: 日志级别
        format_string: 日志格式字符串
        stream: 输出流，默认为sys.stderr
        logger_name: 日志记录器名称，None表示zmqcat根记录器

    Returns:
        logging.Handler: 创建的控制台处理器
    """
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    console_handler.setLevel(_level(level))

    get_logger(logger_name or "zmqcat").addHandler(console_handler)
    return console_handler


def remove_handler(handler: logging.Handler, logger_name: Optional[str] = None) -> None:
    """移除处理器"""
    get_logger(logger_name or "zmqcat").removeHandler(handler)
    handler.close()


def _level(level: str) -> int:
    value = getattr(logging, str(level).upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"未知的日志级别: {level}")
    return value
