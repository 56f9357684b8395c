"""
白板会话

进程的组合根：显式构建 PeerDirectory / Broadcaster / Listener 并与渲染表面连接。
- 本地产生的动作直接、立即应用到本地画布，然后交给发送线程广播
- 远端动作由 Listener 在其接收线程中解码后应用到同一个画布入口

发送在独立线程中进行，界面线程从不等待网络。
"""

from __future__ import annotations

import logging
import threading
from queue import SimpleQueue
from typing import Optional

from whiteboard.client.network import Broadcaster
from whiteboard.server.network import Listener
from whiteboard.shared.config import Settings
from whiteboard.shared.peers import Endpoint, PeerDirectory
from whiteboard.shared.protocols import DrawAction

logger = logging.getLogger(__name__)

_STOP = object()


class WhiteboardSession:
	"""同步会话：本地绘制 + 广播 + 监听"""

	def __init__(
		self,
		surface,
		directory: PeerDirectory,
		broadcaster: Optional[Broadcaster] = None,
		listener: Optional[Listener] = None,
	):
		self.surface = surface
		self.directory = directory
		self.broadcaster = broadcaster or Broadcaster(directory)
		self.listener = listener or Listener(surface.apply_action)
		self._outbox: SimpleQueue = SimpleQueue()
		self._sender: Optional[threading.Thread] = None
		self._lock = threading.RLock()

	@classmethod
	def from_settings(cls, surface, settings: Settings) -> "WhiteboardSession":
		directory = PeerDirectory(settings.peers)
		listener = Listener(surface.apply_action, host=settings.bind_host)
		return cls(surface, directory, listener=listener)

	# 生命周期
	def start(self, port: int, host: Optional[str] = None) -> None:
		"""
		启动监听并记录本机端点。端口不可用时 BindError 直接抛给调用方。
		`host` 为对等节点访问本机所用的地址，需与其配置中的写法一致。
		"""
		with self._lock:
			self.listener.start(port)
			bound = self.listener.port
			self.directory.set_self(Endpoint(host or self.listener.host, bound))
			self._sender = threading.Thread(target=self._send_loop, name="whiteboard-sender", daemon=True)
			self._sender.start()
		logger.info("本机 %s, 已知节点 %s", self.directory.self_endpoint, self.directory.peers_excluding_self())

	def stop(self) -> None:
		with self._lock:
			self.listener.stop()
			sender, self._sender = self._sender, None
			if sender is not None:
				self._outbox.put(_STOP)
				sender.join(timeout=2.0)
			self.broadcaster.close()

	def __enter__(self) -> "WhiteboardSession":
		return self

	def __exit__(self, *exc_info) -> None:
		self.stop()

	# 绘图
	def draw(self, action: DrawAction) -> None:
		"""本地绘制一个动作：立即应用，然后排队广播"""
		self.surface.apply_action(action)
		if self._sender is None:
			logger.debug("会话未启动，仅本地应用 %s", action.mode.name)
			return
		self._outbox.put(action)

	def _send_loop(self) -> None:
		while True:
			item = self._outbox.get()
			if item is _STOP:
				break
			try:
				self.broadcaster.send(item)
			except Exception:
				logger.exception("广播失败")


__all__ = ["WhiteboardSession"]
