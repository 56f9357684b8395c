"""
异常定义

同步层的错误分类。广播与接收过程中的错误按对等节点或按数据报恢复，
只有 BindError 会向启动流程抛出。
"""

from typing import Optional


class WhiteboardError(Exception):
    pass


class ResolutionError(WhiteboardError):
    """Raised when a peer's host name cannot be resolved."""

    def __init__(self, message: str, endpoint=None):
        super().__init__(message)
        self.endpoint = endpoint


class TransportError(WhiteboardError):
    """Raised when a socket cannot be created, or a send/receive fails."""

    def __init__(self, message: str, endpoint=None):
        super().__init__(message)
        self.endpoint = endpoint


class DecodeError(WhiteboardError):
    """Raised when a datagram is truncated, malformed or uses an unknown tag."""


class BindError(WhiteboardError):
    """Raised when the listening port cannot be opened."""

    def __init__(self, message: str, port: Optional[int] = None):
        super().__init__(message)
        self.port = port
