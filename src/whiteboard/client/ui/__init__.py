"""
用户界面模块

提供白板客户端的表现层组件：
- 画布 WhiteboardCanvas：实现 RenderSurface 边界，持有画布状态并应用绘图动作
- 工具栏 Toolbar：绘图模式、颜色与线宽选择
- 按钮 Button：工具栏使用的基础按钮
- 手势 GestureTracker：鼠标操作 -> DrawAction

该模块与 Pygame 紧耦合用于渲染，但不负责网络逻辑；
网络交互由 `whiteboard.client.game.WhiteboardSession` 提供。
"""

from __future__ import annotations

import threading
from queue import Empty, SimpleQueue
from typing import List, Protocol, Tuple

import pygame

from whiteboard.shared.constants import CANVAS_HEIGHT, CANVAS_WIDTH, WHITE
from whiteboard.shared.protocols import DrawAction, DrawMode

from .button import Button
from .gesture import GestureTracker
from .toolbar import Toolbar


class RenderSurface(Protocol):
	"""监听端与本地发送端共同调用的唯一入口"""

	def apply_action(self, action: DrawAction) -> None:
		...


def _box_rect(action: DrawAction) -> pygame.Rect:
	# // 两个对角点可以任意顺序给出
	(x1, y1), (x2, y2) = action.points
	left, top = min(x1, x2), min(y1, y2)
	return pygame.Rect(left, top, abs(x2 - x1) + 1, abs(y2 - y1) + 1)


def draw_action(surface: pygame.Surface, action: DrawAction) -> None:
	"""把一个绘图动作画到给定的表面上"""
	mode = action.mode
	color = action.color
	width = action.width
	if mode == DrawMode.CLEAR:
		surface.fill(color)
	elif mode == DrawMode.LINE:
		start, end = action.points
		pygame.draw.line(surface, color, start, end, width)
	elif mode == DrawMode.FREEFORM:
		pts = action.points
		if len(pts) == 1:
			pygame.draw.circle(surface, color, pts[0], max(1, width // 2))
			return
		# // 使用相邻点连线近似笔划，粗线在拐点补圆避免缺口
		for i in range(1, len(pts)):
			pygame.draw.line(surface, color, pts[i - 1], pts[i], width)
		if width > 2:
			for p in pts:
				pygame.draw.circle(surface, color, p, width // 2)
	elif mode == DrawMode.RECTANGLE:
		pygame.draw.rect(surface, color, _box_rect(action), width)
	elif mode == DrawMode.FILLED_RECTANGLE:
		pygame.draw.rect(surface, color, _box_rect(action))
	elif mode == DrawMode.ELLIPSE:
		pygame.draw.ellipse(surface, color, _box_rect(action), width)
	elif mode == DrawMode.FILLED_ELLIPSE:
		pygame.draw.ellipse(surface, color, _box_rect(action))


class WhiteboardCanvas:
	"""
	画布组件：唯一持有绘图状态的对象。

	apply_action 可以在任意线程调用（监听线程或界面线程），只负责入队；
	真正的绘制在界面线程调用 flush() 时串行完成。
	"""

	def __init__(self, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT, background: Tuple[int, int, int] = WHITE):
		self.width = width
		self.height = height
		self.background = background
		self.surface = pygame.Surface((width, height))
		self.surface.fill(background)
		self._pending: SimpleQueue[DrawAction] = SimpleQueue()
		self._lock = threading.Lock()
		self.applied = 0

	# RenderSurface
	def apply_action(self, action: DrawAction) -> None:
		self._pending.put(action)

	def flush(self) -> List[DrawAction]:
		"""在界面线程中应用所有待处理动作，返回本次应用的动作"""
		done: List[DrawAction] = []
		with self._lock:
			while True:
				try:
					action = self._pending.get_nowait()
				except Empty:
					break
				draw_action(self.surface, action)
				done.append(action)
			self.applied += len(done)
		return done

	# 渲染
	def render(self, target: pygame.Surface, dest: Tuple[int, int] = (0, 0)) -> None:
		self.flush()
		target.blit(self.surface, dest)

	def get_at(self, pos: Tuple[int, int]) -> Tuple[int, int, int]:
		r, g, b, _ = self.surface.get_at(pos)
		return (r, g, b)


__all__ = [
	"RenderSurface",
	"WhiteboardCanvas",
	"draw_action",
	"Button",
	"GestureTracker",
	"Toolbar",
]
