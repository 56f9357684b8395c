"""
广播发送端：把一个 DrawAction 以 UDP 数据报逐个发送给所有已知对等节点（自己除外）。

尽力而为：没有重试、确认或顺序保证。单个节点的解析/发送失败只记录日志，
不会影响其余节点。
"""
from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from whiteboard.shared.constants import RESOLVE_TIMEOUT
from whiteboard.shared.errors import ResolutionError, TransportError, WhiteboardError
from whiteboard.shared.peers import Endpoint, PeerDirectory
from whiteboard.shared.protocols import ActionCodec, DrawAction

logger = logging.getLogger(__name__)

# (family, sockaddr)
Resolved = Tuple[int, Any]
Resolver = Callable[[Endpoint], Resolved]
SocketFactory = Callable[[int, int], socket.socket]


def resolve_endpoint(endpoint: Endpoint) -> Resolved:
    """解析主机名，返回第一个 IPv4 UDP 地址（监听端只绑定 IPv4）"""
    try:
        infos = socket.getaddrinfo(endpoint.host, endpoint.port, family=socket.AF_INET, type=socket.SOCK_DGRAM)
    except (OSError, UnicodeError) as exc:
        raise ResolutionError(f"could not resolve {endpoint}: {exc}", endpoint) from exc
    if not infos:
        raise ResolutionError(f"no address for {endpoint}", endpoint)
    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


def numeric_address(endpoint: Endpoint) -> Optional[Resolved]:
    """IP 字面量无需查询 DNS，直接得到地址；否则返回 None"""
    try:
        ip = ipaddress.ip_address(endpoint.host)
    except ValueError:
        return None
    if ip.version == 4:
        return socket.AF_INET, (endpoint.host, endpoint.port)
    return socket.AF_INET6, (endpoint.host, endpoint.port, 0, 0)


@dataclass
class BroadcastReport:
    """一次 send() 的结果"""

    delivered: List[Endpoint] = field(default_factory=list)
    failures: List[Tuple[Endpoint, WhiteboardError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Broadcaster:
    """逐节点 UDP 单播，模拟多播"""

    def __init__(
        self,
        directory: PeerDirectory,
        codec: Optional[ActionCodec] = None,
        resolver: Optional[Resolver] = None,
        socket_factory: Optional[SocketFactory] = None,
        resolve_timeout: float = RESOLVE_TIMEOUT,
    ) -> None:
        self.directory = directory
        self.codec = codec or ActionCodec()
        self._resolver = resolver or resolve_endpoint
        self._socket_factory = socket_factory or socket.socket
        self._resolve_timeout = resolve_timeout
        # 仍在进行中的主机名查询（超时后线程不会被强行终止）
        self._lookups: Dict[Endpoint, threading.Thread] = {}
        self._lock = threading.Lock()

    def send(self, action: DrawAction) -> BroadcastReport:
        """编码一次，然后向除自己以外的每个节点发送一个数据报"""
        payload = self.codec.encode(action)
        report = BroadcastReport()
        for peer in self.directory.peers_excluding_self():
            try:
                self._send_one(peer, payload)
            except (ResolutionError, TransportError) as exc:
                logger.warning("发送到 %s 失败: %s", peer, exc)
                report.failures.append((peer, exc))
            else:
                report.delivered.append(peer)
        logger.debug(
            "广播 %s: 成功 %d, 失败 %d", action.mode.name, len(report.delivered), len(report.failures)
        )
        return report

    def close(self) -> None:
        """不再等待尚未返回的主机名查询（查询线程为守护线程）"""
        with self._lock:
            pending = [peer for peer, thread in self._lookups.items() if thread.is_alive()]
            self._lookups.clear()
        if pending:
            logger.debug("关闭时仍有未完成的解析: %s", pending)

    def __enter__(self) -> "Broadcaster":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # 内部方法
    def _resolve(self, peer: Endpoint) -> Resolved:
        resolved = numeric_address(peer)
        if resolved is not None:
            return resolved

        with self._lock:
            stuck = self._lookups.get(peer)
            if stuck is not None and stuck.is_alive():
                # 上一次对该节点的查询还没返回，不再叠加新的线程
                raise ResolutionError(f"resolving {peer} still pending", peer)

        result: Dict[str, Any] = {}

        def _lookup() -> None:
            try:
                result["value"] = self._resolver(peer)
            except Exception as exc:
                result["error"] = exc

        # 每次查询一个守护线程，卡住的查询不会占用其它节点的解析
        thread = threading.Thread(target=_lookup, name=f"resolve-{peer}", daemon=True)
        with self._lock:
            self._lookups[peer] = thread
        thread.start()
        thread.join(self._resolve_timeout)
        if thread.is_alive():
            raise ResolutionError(f"resolving {peer} timed out", peer)
        with self._lock:
            if self._lookups.get(peer) is thread:
                del self._lookups[peer]

        error = result.get("error")
        if isinstance(error, ResolutionError):
            raise error
        if error is not None:
            raise ResolutionError(f"could not resolve {peer}: {error}", peer) from error
        return result["value"]

    def _send_one(self, peer: Endpoint, payload: bytes) -> None:
        family, sockaddr = self._resolve(peer)
        try:
            sock = self._socket_factory(family, socket.SOCK_DGRAM)
        except OSError as exc:
            raise TransportError(f"could not create socket: {exc}", peer) from exc
        # 每次发送独立的套接字，任何退出路径都会关闭
        with sock:
            try:
                sock.sendto(payload, sockaddr)
            except OSError as exc:
                raise TransportError(f"error sending packet to {peer}: {exc}", peer) from exc


__all__ = ["Broadcaster", "BroadcastReport", "resolve_endpoint"]
