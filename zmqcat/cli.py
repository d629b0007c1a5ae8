#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
命令行入口

解析命令行参数，构建会话配置，分派到对应的消息角色，
并在这里统一把会话结果映射为进程退出码。
"""

import argparse
import sys
from typing import List, Optional, Tuple

from . import __version__
from .core.config import DEFAULT_ADDRESS, TransportConfig, SessionConfig, load_config
from .core.session import Completed, Outcome, PatternSession
from .core.termination import TerminationController
from .exceptions.base import ConfigurationError, ZmqCatError
from .io.bridge import IOBridge
from .logging.logger import configure_from_dict, get_logger
from .logging.reporter import StatusReporter
from .patterns import PATTERN_TYPES, get_pattern_class

logger = get_logger(__name__)

USAGE = f"""zmqcat - ZeroMQ CLI Tool

Usage: zmqcat <command> [address] [options]

Commands:
  sub       Subscribe to messages (SUB socket)
  pub       Publish messages (PUB socket)
  req       Send requests (REQ socket - client)
  rep       Reply to requests (REP socket - server)
  push      Push messages to pipeline (PUSH socket)
  pull      Pull messages from pipeline (PULL socket)

Options:
  -a, --address <addr>    ZeroMQ address (default: {DEFAULT_ADDRESS})
  -t, --timeout <sec>     Exit after N seconds (0 = infinite)
  -c, --count <num>       Exit after N messages (0 = unlimited)
  --topic <topic>         Topic filter (SUB) or prefix (PUB)
  -b, --bind              Bind socket (server mode)
  --connect               Connect socket (client mode, default)
  -v, --verbose           Verbose output
  -q, --quiet             Quiet mode (no info logs)
  --config <file>         Load transport/logging settings (YAML or JSON)
  --log-level <level>     Internal log level (default: WARNING)
  --version               Show version

Quick Examples:
  zmqcat sub tcp://localhost:5556 --timeout 30
  zmqcat pub tcp://*:5556 --bind
  echo "test" | zmqcat pub tcp://localhost:5556
  zmqcat pull tcp://localhost:5558 --count 100

More Help:
  zmqcat --quickstart     Show quick start guide with all patterns
  zmqcat --examples       Alias for --quickstart
"""

QUICKSTART = """=== ZMQCAT QUICK START GUIDE ===

## BASIC TEST

  Terminal 1 - Subscriber:
    zmqcat sub tcp://*:5556 --bind --timeout 10

  Terminal 2 - Publisher:
    echo "Hello ZeroMQ!" | zmqcat pub tcp://localhost:5556

  You should see "Hello ZeroMQ!" in Terminal 1!

## ALL PATTERNS

### PUB/SUB (1-to-many broadcast)
  Terminal 1:
    zmqcat sub tcp://localhost:5556 --topic weather
  Terminal 2:
    echo "sunny 25C" | zmqcat pub tcp://*:5556 --bind --topic weather

### REQ/REP (request-reply)
  Terminal 1 - Server:
    zmqcat rep tcp://*:5557 --bind
  Terminal 2 - Client:
    echo "ping" | zmqcat req tcp://localhost:5557

### PUSH/PULL (load-balanced pipeline)
  Terminal 1 & 2 - Workers:
    zmqcat pull tcp://localhost:5558
  Terminal 3 - Work distributor:
    seq 1 10 | zmqcat push tcp://*:5558 --bind

## COMMON FLAGS

  Run for 30 seconds:          zmqcat sub tcp://localhost:5556 --timeout 30
  Get 100 messages then exit:  zmqcat sub tcp://localhost:5556 --count 100
  Verbose mode:                zmqcat sub tcp://localhost:5556 --verbose
  Quiet mode:                  zmqcat sub tcp://localhost:5556 --quiet

## ADVANCED USAGE

  Grep messages:
    zmqcat sub tcp://logs:5556 | grep ERROR
  Count messages in 60s:
    zmqcat sub tcp://events:5556 --timeout 60 | wc -l
  Publish from file:
    cat messages.txt | zmqcat pub tcp://*:5556 --bind

### Multiple publishers to single consumer
    zmqcat push tcp://*:5558 --bind
    zmqcat push tcp://localhost:5558
    zmqcat pull tcp://localhost:5558

### Chain patterns (relay messages)
    zmqcat pub tcp://*:5556 --bind
    zmqcat sub tcp://localhost:5556 | zmqcat pub tcp://*:5557 --bind
    zmqcat sub tcp://localhost:5557

## PATTERN CHEAT SHEET

  PUB/SUB:    1-to-many broadcast, all subscribers get all messages
  REQ/REP:    Synchronous request-reply, 1-to-1
  PUSH/PULL:  Load-balanced pipeline, round-robin distribution

For complete documentation, use: zmqcat --help
"""


class _ArgumentParser(argparse.ArgumentParser):
    """参数解析错误不直接退出进程，而是抛出配置异常"""

    def error(self, message):
        raise ConfigurationError(message, config_key="arguments")


# 带值的选项及其长选项名
VALUE_OPTIONS = {
    "-a": "--address",
    "--address": "--address",
    "-t": "--timeout",
    "--timeout": "--timeout",
    "-c": "--count",
    "--count": "--count",
    "--topic": "--topic",
    "--config": "--config",
    "--log-level": "--log-level",
}

FLAG_OPTIONS = {"-b", "--bind", "--connect", "-v", "--verbose", "-q", "--quiet"}


def build_parser() -> argparse.ArgumentParser:
    """构建参数解析器

    数值选项按字符串接收，由lenient_int宽松转换。
    """
    parser = _ArgumentParser(prog="zmqcat", add_help=False, allow_abbrev=False)
    parser.add_argument("command")
    parser.add_argument("address", nargs="?")
    parser.add_argument("-a", "--address", dest="address_option")
    parser.add_argument("-t", "--timeout")
    parser.add_argument("-c", "--count")
    parser.add_argument("--topic")
    parser.add_argument("-b", "--bind", dest="bind", action="store_true", default=False)
    parser.add_argument("--connect", dest="bind", action="store_false")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("--config")
    parser.add_argument("--log-level", dest="log_level")
    return parser


def normalize_argv(argv: List[str]) -> Tuple[List[str], List[str]]:
    """按顺序扫描一遍参数

    带值的选项总是取下一个参数作为值（即使它以"-"开头），写成"--name=value"形式；
    未知选项被丢弃，其余参数原样保留为位置参数。

    Returns:
        (规范化后的参数, 被忽略的参数)
    """
    normalized: List[str] = []
    ignored: List[str] = []
    tokens = iter(argv)

    for token in tokens:
        name, sep, value = token.partition("=")
        if sep and name.startswith("--") and name in VALUE_OPTIONS:
            normalized.append(f"{VALUE_OPTIONS[name]}={value}")
        elif token in VALUE_OPTIONS:
            value = next(tokens, None)
            if value is None:
                ignored.append(token)
            else:
                normalized.append(f"{VALUE_OPTIONS[token]}={value}")
        elif token in FLAG_OPTIONS:
            normalized.append(token)
        elif token.startswith("-") and token != "-":
            ignored.append(token)
        else:
            normalized.append(token)

    return normalized, ignored


def parse_args(argv: List[str]) -> argparse.Namespace:
    """解析命令行参数，未知选项被忽略

    Raises:
        ConfigurationError: 参数无法解析
    """
    normalized, ignored = normalize_argv(argv)
    args, extra = build_parser().parse_known_intermixed_args(normalized)
    if ignored or extra:
        logger.debug(f"忽略未知参数: {ignored + extra}")
    return args


def lenient_int(value: Optional[str], default: int = 0) -> int:
    """宽松的非负整数转换

    无法解析或为负数时返回默认值，不报错。
    """
    if value is None:
        return default
    try:
        number = int(value)
    except ValueError:
        logger.debug(f"忽略无效数值: {value!r}")
        return default
    return number if number >= 0 else default


def build_session_config(args: argparse.Namespace) -> SessionConfig:
    """由解析结果构建会话配置"""
    return SessionConfig(
        address=args.address_option or args.address or DEFAULT_ADDRESS,
        bind=args.bind,
        timeout_seconds=lenient_int(args.timeout),
        message_limit=lenient_int(args.count),
        topic=args.topic or "",
        verbose=args.verbose,
        quiet=args.quiet,
    )


def exit_code(outcome: Outcome) -> int:
    """把会话结果映射为进程退出码"""
    return 0 if isinstance(outcome, Completed) else 1


def run_session(command: str,
                config: SessionConfig,
                transport: Optional[TransportConfig] = None,
                stdin=None,
                stdout=None,
                stderr=None,
                token: Optional[TerminationController] = None) -> Outcome:
    """运行一个会话

    Args:
        command: 命令名称（sub/pub/req/rep/push/pull）
        config: 会话配置
        transport: 传输配置
        stdin: 输入流
        stdout: 输出流（消息内容）
        stderr: 诊断输出流
        token: 取消令牌，为None时创建并安装信号处理函数

    Returns:
        Outcome: 会话结果

    Raises:
        ConfigurationError: 未知命令
    """
    role_class = get_pattern_class(command)
    reporter = StatusReporter(verbose=config.verbose, quiet=config.quiet, stream=stderr)

    owns_token = token is None
    if owns_token:
        token = TerminationController()
        token.install_signal_handlers()

    try:
        role = role_class(config, transport, reporter)
        session = PatternSession(role, token, IOBridge(stdin, stdout), reporter)
        return session.run()
    finally:
        if owns_token:
            token.stop()
        reporter.close()


def main(argv: Optional[List[str]] = None) -> int:
    """命令行主函数

    Returns:
        int: 进程退出码
    """
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv or argv[0] in ("-h", "--help"):
        sys.stdout.write(USAGE)
        return 0

    if argv[0] in ("--quickstart", "--examples"):
        sys.stdout.write(QUICKSTART)
        return 0

    if argv[0] == "--version":
        sys.stdout.write(f"zmqcat {__version__}\n")
        return 0

    try:
        args = parse_args(argv)
    except ConfigurationError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    command = args.command.lower()
    if command not in PATTERN_TYPES:
        sys.stderr.write(f"Unknown command: {command}\n")
        sys.stderr.write(USAGE)
        return 1

    try:
        tool_config = load_config(args.config)
        logging_settings = tool_config.to_dict()["logging"]
        if args.log_level:
            logging_settings["level"] = args.log_level
        configure_from_dict(logging_settings)
        outcome = run_session(command, build_session_config(args), tool_config.zmq)
    except (ZmqCatError, ValueError) as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    return exit_code(outcome)
