"""
启动配置

按优先级从低到高合并：默认值 -> settings.json -> 环境变量 -> 命令行参数。
文件与环境变量中的非法值只记录警告并保留原值；命令行参数非法时由 argparse 报错退出。
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from whiteboard.shared.constants import (
    DEFAULT_BIND_HOST,
    DEFAULT_HOST,
    DEFAULT_PEERS,
    DEFAULT_PORT,
)
from whiteboard.shared.peers import Endpoint

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
ENV_PREFIX = "WHITEBOARD_"


@dataclass
class Settings:
    """进程启动参数"""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    bind_host: str = DEFAULT_BIND_HOST
    peers: List[Endpoint] = field(default_factory=lambda: [Endpoint(h, p) for h, p in DEFAULT_PEERS])
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def self_endpoint(self) -> Endpoint:
        return Endpoint(self.host, self.port)


def _parse_port(value: Any) -> int:
    port = int(value)
    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range: {port}")
    return port


def _parse_peers(value: Any) -> List[Endpoint]:
    if isinstance(value, str):
        items = [v for v in value.split(",") if v.strip()]
    else:
        items = list(value)
    peers = []
    for item in items:
        if isinstance(item, str):
            peers.append(Endpoint.parse(item))
        elif isinstance(item, Mapping):
            peers.append(Endpoint(str(item["host"]), int(item["port"])))
        else:
            host, port = item
            peers.append(Endpoint(str(host), int(port)))
    return peers


def _parse_level(value: Any) -> str:
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level: {value!r}")
    return level


_PARSERS = {
    "host": str,
    "port": _parse_port,
    "bind_host": str,
    "peers": _parse_peers,
    "log_level": _parse_level,
    "log_file": str,
}


def _apply(settings: Settings, values: Mapping[str, Any], source: str) -> None:
    for key, raw in values.items():
        parse = _PARSERS.get(key)
        if parse is None:
            logger.warning("忽略未知配置项 %s (来源: %s)", key, source)
            continue
        try:
            setattr(settings, key, parse(raw))
        except (TypeError, ValueError, KeyError) as exc:
            logger.warning("配置项 %s=%r 无效 (来源: %s): %s", key, raw, source, exc)


def load_file(settings: Settings, path: Path) -> None:
    """从 JSON 文件加载设置（如果存在）。"""
    if not path.exists():
        return
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("加载设置失败 %s: %s", path, exc)
        return
    if not isinstance(data, dict):
        logger.warning("设置文件 %s 顶层必须是对象", path)
        return
    _apply(settings, data, str(path))


def load_env(settings: Settings, environ: Mapping[str, str]) -> None:
    values: Dict[str, Any] = {}
    for key in _PARSERS:
        name = ENV_PREFIX + key.upper()
        if name in environ:
            values[key] = environ[name]
    _apply(settings, values, "environment")


def build_arg_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Peer-to-peer synchronized whiteboard")
    parser.add_argument("-p", "--port", type=_parse_port, help="local listening port")
    parser.add_argument("--host", help="address peers use to reach this instance")
    parser.add_argument("--bind", dest="bind_host", help="address to bind the listener to")
    parser.add_argument(
        "--peer",
        dest="peers",
        action="append",
        type=Endpoint.parse,
        metavar="HOST:PORT",
        help="known peer (repeatable); replaces the configured peer list",
    )
    parser.add_argument("--settings", type=Path, help="path to settings.json")
    parser.add_argument("--log-level", type=_parse_level)
    parser.add_argument("--log-file")
    return parser


def load_settings(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    path: Optional[Path] = None,
    prog: Optional[str] = None,
) -> Settings:
    args = build_arg_parser(prog).parse_args(argv)
    settings = Settings()
    # 默认在当前工作目录下查找，每次调用时确定
    load_file(settings, args.settings or path or Path.cwd() / SETTINGS_FILE)
    load_env(settings, os.environ if environ is None else environ)
    # 命令行参数优先级最高
    cli = {k: v for k, v in vars(args).items() if k != "settings" and v is not None}
    for key, value in cli.items():
        setattr(settings, key, value)
    return settings


__all__ = ["Settings", "load_settings", "build_arg_parser", "SETTINGS_FILE"]
