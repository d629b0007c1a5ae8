#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
消息模式模块

提供ZeroMQ的六种消息角色，包括：
- 发布-订阅模式 (pub / sub)
- 请求-应答模式 (req / rep)
- 推送-拉取模式 (push / pull)
"""

from ..exceptions.base import ConfigurationError
from .pubsub import Publisher, Subscriber, apply_topic
from .reqrep import Requester, Replier, make_reply
from .pushpull import Pusher, Puller

__all__ = [
    # 发布-订阅模式
    'Publisher',
    'Subscriber',
    'apply_topic',

    # 请求-应答模式
    'Requester',
    'Replier',
    'make_reply',

    # 推送-拉取模式
    'Pusher',
    'Puller',

    'PATTERN_TYPES',
    'get_pattern_class',
]

# 命令名到角色类的映射
PATTERN_TYPES = {
    'sub': Subscriber,
    'pub': Publisher,
    'req': Requester,
    'rep': Replier,
    'push': Pusher,
    'pull': Puller,
}


def get_pattern_class(pattern_name: str):
    """根据命令名称获取对应的角色类

    Args:
        pattern_name: 命令名称（不区分大小写）

    Returns:
        对应的角色类

    Raises:
        ConfigurationError: 未知的命令名称
    """
    key = pattern_name.lower().strip()
    if key in PATTERN_TYPES:
        return PATTERN_TYPES[key]

    raise ConfigurationError(f"Unknown command: {key}", config_key="command")
