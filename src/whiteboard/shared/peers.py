"""
对等节点目录

保存静态配置的对等节点端点，以及本机端点（用于避免给自己发送消息）。
启动时填充，之后只读；没有动态发现或移除。
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class Endpoint:
    """主机/端口对。按值比较：主机字符串与端口完全一致才相等，不做 DNS 规范化。"""

    host: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host:
            raise ValueError(f"invalid host: {self.host!r}")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"invalid port: {self.port!r}")
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def parse(cls, text: str) -> "Endpoint":
        """解析 "host:port" 形式的字符串"""
        host, sep, port = text.strip().rpartition(":")
        if not sep or not host:
            raise ValueError(f"expected host:port, got {text!r}")
        try:
            return cls(host, int(port))
        except ValueError:
            raise ValueError(f"expected host:port, got {text!r}") from None

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class PeerDirectory:
    """已知对等节点集合"""

    def __init__(self, endpoints: Iterable[Endpoint] = ()) -> None:
        self._lock = threading.RLock()
        self._peers: Tuple[Endpoint, ...] = tuple(endpoints)
        self._self: Optional[Endpoint] = None

    def configure(self, endpoints: Iterable[Endpoint]) -> None:
        """替换已知节点列表（启动时调用一次）"""
        with self._lock:
            self._peers = tuple(endpoints)

    def set_self(self, endpoint: Endpoint) -> None:
        """记录本机端点，广播时跳过它"""
        with self._lock:
            self._self = endpoint

    @property
    def self_endpoint(self) -> Optional[Endpoint]:
        return self._self

    @property
    def peers(self) -> Tuple[Endpoint, ...]:
        return self._peers

    def peers_excluding_self(self) -> List[Endpoint]:
        with self._lock:
            me = self._self
            return [p for p in self._peers if p != me]

    def __len__(self) -> int:
        return len(self._peers)

    def __repr__(self) -> str:
        peers = ", ".join(str(p) for p in self._peers)
        return f"PeerDirectory([{peers}], self={self._self})"


__all__ = ["Endpoint", "PeerDirectory"]
