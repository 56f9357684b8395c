"""
网络监听模块

绑定 UDP 端口，循环接收数据报，解码后交给渲染表面（RenderSurface）应用。
"""

from __future__ import annotations

import logging
import socket
import threading
from enum import Enum
from typing import Callable, Optional

from whiteboard.shared.constants import (
	BUFFER_SIZE,
	DEFAULT_BIND_HOST,
	LISTENER_JOIN_TIMEOUT,
	RECV_POLL_INTERVAL,
)
from whiteboard.shared.errors import BindError, DecodeError, TransportError
from whiteboard.shared.protocols import ActionCodec, DrawAction

logger = logging.getLogger(__name__)

ActionCallback = Callable[[DrawAction], None]


class ListenerState(Enum):
	IDLE = "idle"
	LISTENING = "listening"
	STOPPED = "stopped"


class Listener:
	"""UDP 监听器：Idle -> Listening -> Stopped"""

	def __init__(
		self,
		on_action: ActionCallback,
		codec: Optional[ActionCodec] = None,
		host: str = DEFAULT_BIND_HOST,
		poll_interval: float = RECV_POLL_INTERVAL,
	):
		self.on_action = on_action
		self.codec = codec or ActionCodec()
		self.host = host
		self.poll_interval = poll_interval
		self.state = ListenerState.IDLE
		self._sock: Optional[socket.socket] = None
		self._thread: Optional[threading.Thread] = None
		self._running = threading.Event()
		self._lock = threading.RLock()
		self._port: Optional[int] = None
		# 统计
		self.received = 0
		self.applied = 0
		self.rejected = 0

	@property
	def port(self) -> Optional[int]:
		"""实际绑定的端口（start(0) 时为系统分配的端口）"""
		return self._port

	@property
	def listening(self) -> bool:
		return self.state is ListenerState.LISTENING

	# 生命周期
	def start(self, port: int) -> None:
		"""绑定端口并启动接收线程；端口不可用时抛出 BindError"""
		with self._lock:
			if self.state is not ListenerState.IDLE:
				raise RuntimeError(f"listener already {self.state.value}")
			sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
			try:
				sock.bind((self.host, port))
			except OSError as exc:
				sock.close()
				raise BindError(f"cannot listen on {self.host}:{port}: {exc}", port) from exc
			# // 超时轮询，保证 stop() 在任何平台上都能被接收循环观察到
			sock.settimeout(self.poll_interval)
			self._sock = sock
			self._port = sock.getsockname()[1]
			self.state = ListenerState.LISTENING
			self._running.set()
			self._thread = threading.Thread(
				target=self._recv_loop, args=(sock,), name=f"listener-{self._port}", daemon=True
			)
			self._thread.start()
		logger.info("开始监听 %s:%d", self.host, self._port)

	def stop(self, timeout: float = LISTENER_JOIN_TIMEOUT) -> None:
		"""停止监听并释放套接字（可重复调用）"""
		with self._lock:
			if self.state is ListenerState.STOPPED:
				return
			was_listening = self.state is ListenerState.LISTENING
			self.state = ListenerState.STOPPED
			self._running.clear()
			sock, self._sock = self._sock, None
			if sock is not None:
				# // 唤醒阻塞中的 recvfrom
				try:
					sock.shutdown(socket.SHUT_RDWR)
				except OSError:
					pass
				sock.close()
			thread = self._thread
		if thread is not None and thread is not threading.current_thread():
			thread.join(timeout)
			if thread.is_alive():
				logger.warning("接收线程未能在 %.1fs 内退出", timeout)
		if was_listening:
			logger.info("停止监听端口 %s", self._port)

	def __enter__(self) -> "Listener":
		return self

	def __exit__(self, *exc_info) -> None:
		self.stop()

	# 接收循环
	def _recv_loop(self, sock: socket.socket) -> None:
		while self._running.is_set():
			try:
				data, addr = sock.recvfrom(BUFFER_SIZE)
			except socket.timeout:
				continue
			except OSError as exc:
				if not self._running.is_set() or sock.fileno() == -1:
					# // 套接字已被 stop() 关闭，正常退出
					break
				# // 例如 Windows 上 ICMP 不可达导致的 ConnectionResetError
				logger.warning("%s", TransportError(f"receive failed: {exc}"))
				continue
			if not self._running.is_set():
				break
			self._handle_datagram(data, addr)
		logger.debug("接收循环退出")

	def _handle_datagram(self, data: bytes, addr) -> None:
		"""解码一个数据报并应用；任何单个数据报的问题都不会终止循环"""
		self.received += 1
		try:
			action = self.codec.decode(data)
		except DecodeError as exc:
			self.rejected += 1
			logger.warning("丢弃来自 %s:%s 的非法数据报: %s", addr[0], addr[1], exc)
			return
		try:
			self.on_action(action)
		except Exception:
			logger.exception("应用来自 %s:%s 的绘图动作失败", addr[0], addr[1])
			return
		self.applied += 1


__all__ = ["Listener", "ListenerState"]
