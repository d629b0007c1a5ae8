#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
配置管理模块

提供工具配置（传输参数、日志）和单次会话配置，
支持从文件、环境变量等多种方式加载配置。
"""

import json
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from ..exceptions.base import ConfigurationError
from ..logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ADDRESS = "tcp://localhost:5556"
ENV_PREFIX = "ZMQCAT_"


class TransportConfig(BaseModel):
    """ZeroMQ传输相关配置"""
    poll_interval_ms: int = Field(default=100, gt=0, description="有界等待接收的轮询间隔(毫秒)")
    reply_timeout_ms: int = Field(default=5000, gt=0, description="请求角色等待应答的时间(毫秒)")
    connect_grace_ms: int = Field(default=100, ge=0, description="发布/推送角色首次发送前的等待时间(毫秒)")
    linger: int = Field(default=1000, description="socket关闭时等待未发送消息的时间(毫秒)")
    high_water_mark: int = Field(default=1000, ge=0, description="高水位标记")
    io_threads: int = Field(default=1, gt=0, description="IO线程数")


class LoggingConfig(BaseModel):
    """内部日志配置"""
    level: str = Field(default="WARNING", description="日志级别")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="日志格式"
    )
    file_path: Optional[str] = Field(default=None, description="日志文件路径")
    max_file_size: int = Field(default=10*1024*1024, description="日志文件最大大小(字节)")
    backup_count: int = Field(default=5, description="日志文件备份数量")
    console_output: bool = Field(default=True, description="是否输出到标准错误")


class Config(BaseModel):
    """工具配置"""

    zmq: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: str) -> "Config":
        """从配置文件加载配置

        Args:
            config_path: 配置文件路径，支持YAML和JSON格式

        Returns:
            Config: 配置实例

        Raises:
            ConfigurationError: 配置文件不存在或格式错误
        """
        if not os.path.exists(config_path):
            raise ConfigurationError(f"配置文件不存在: {config_path}", config_key="config")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.endswith(('.yml', '.yaml')):
                    config_data = yaml.safe_load(f) or {}
                elif config_path.endswith('.json'):
                    config_data = json.load(f)
                else:
                    raise ConfigurationError(f"不支持的配置文件格式: {config_path}", config_key="config")

            logger.info(f"从文件加载配置: {config_path}")
            return cls(**config_data)

        except ConfigurationError:
            raise
        except (OSError, ValueError, yaml.YAMLError, PydanticValidationError) as e:
            logger.error(f"加载配置文件失败: {e}")
            raise ConfigurationError(f"配置文件格式错误: {e}", config_key="config")

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, base: Optional["Config"] = None) -> "Config":
        """从环境变量加载配置

        嵌套字段使用双下划线分隔，例如 ZMQCAT_ZMQ__POLL_INTERVAL_MS=50。

        Args:
            prefix: 环境变量前缀
            base: 作为基础的配置，环境变量覆盖其中的字段

        Returns:
            Config: 配置实例
        """
        config_data: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue

            config_key = key[len(prefix):].lower()
            parts = config_key.split('__')
            current = config_data
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = cls._convert_env_value(value)

        if config_data:
            logger.info(f"从环境变量加载配置，前缀: {prefix}")

        return (base or cls()).merge(config_data)

    @staticmethod
    def _convert_env_value(value: str) -> Any:
        """转换环境变量值为合适的类型"""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        return value

    def merge(self, updates: Dict[str, Any]) -> "Config":
        """合并嵌套字典，返回新的配置实例

        Raises:
            ConfigurationError: 合并后的值无法通过验证
        """
        data = self.model_dump()
        for section, values in updates.items():
            if isinstance(values, dict) and isinstance(data.get(section), dict):
                data[section].update(values)
            else:
                data[section] = values

        try:
            return type(self)(**data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"配置值无效: {e}")

    def get(self, key: str, default=None):
        """使用点号分隔的键获取配置值

        Args:
            key: 配置键，如 'zmq.poll_interval_ms'
            default: 默认值

        Returns:
            配置值或默认值
        """
        value: Any = self
        for part in key.split('.'):
            if not hasattr(value, part):
                return default
            value = getattr(value, part)
        return value

    def to_dict(self) -> dict:
        """将配置导出为字典"""
        return self.model_dump()


class SessionConfig(BaseModel):
    """单次会话配置

    由命令行参数构建，构建后不可修改。
    """
    model_config = ConfigDict(frozen=True)

    address: str = Field(default=DEFAULT_ADDRESS, description="ZeroMQ地址，原样传给传输层")
    bind: bool = Field(default=False, description="True为绑定（监听），False为连接")
    timeout_seconds: int = Field(default=0, ge=0, description="运行时长上限(秒)，0表示不限")
    message_limit: int = Field(default=0, ge=0, description="消息数量上限，0表示不限")
    topic: str = Field(default="", description="订阅过滤前缀或发布前缀")
    verbose: bool = Field(default=False, description="输出逐条消息跟踪")
    quiet: bool = Field(default=False, description="不输出生命周期信息")

    @property
    def mode(self) -> str:
        return "bind" if self.bind else "connect"


def load_config(config_path: Optional[str] = None, env_prefix: str = ENV_PREFIX) -> Config:
    """加载工具配置

    优先级：默认值 < 配置文件 < 环境变量。

    Args:
        config_path: 可选的配置文件路径
        env_prefix: 环境变量前缀

    Returns:
        Config: 配置实例
    """
    config = Config.from_file(config_path) if config_path else Config()
    return Config.from_env(env_prefix, base=config)
