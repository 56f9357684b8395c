"""
手势跟踪：把鼠标按下/移动/抬起转换为 DrawAction。

自由笔划按块发送（每 FLUSH_POINTS 个点一次），远端可以边画边看到；
相邻两块共享一个端点，保证笔划连续。
"""

from typing import Callable, List, Optional, Tuple

from whiteboard.shared.constants import MAX_FREEFORM_POINTS
from whiteboard.shared.protocols import DrawAction, DrawMode, Point

FLUSH_POINTS = 16


class GestureTracker:
    def __init__(self, emit: Callable[[DrawAction], None], flush_points: int = FLUSH_POINTS):
        self.emit = emit
        self.flush_points = max(2, min(flush_points, MAX_FREEFORM_POINTS))
        self.mode: Optional[DrawMode] = None
        self.color: Tuple[int, int, int] = (0, 0, 0)
        self.width = 1
        self._start: Optional[Point] = None
        self._current: Optional[Point] = None
        self._points: List[Point] = []
        # 本次自由笔划是否已经发出过块
        self._sent_any = False

    @property
    def active(self) -> bool:
        return self.mode is not None

    def begin(self, mode: DrawMode, pos: Point, color: Tuple[int, int, int], width: int) -> None:
        self.mode = DrawMode(mode)
        self.color = tuple(color)
        self.width = width
        p = (int(pos[0]), int(pos[1]))
        self._start = self._current = p
        self._points = [p]
        self._sent_any = False

    def move(self, pos: Point) -> None:
        if not self.active:
            return
        p = (int(pos[0]), int(pos[1]))
        self._current = p
        if self.mode != DrawMode.FREEFORM:
            return
        if self._points and self._points[-1] == p:
            return
        self._points.append(p)
        if len(self._points) >= self.flush_points:
            self._flush_freeform()

    def end(self, pos: Optional[Point] = None) -> Optional[DrawAction]:
        """结束手势，返回最后发出的动作（若有）"""
        if not self.active:
            return None
        if pos is not None:
            self.move(pos)
        action = None
        if self.mode == DrawMode.FREEFORM:
            # 只剩上一块的衔接点时无需再发
            if len(self._points) > 1 or not self._sent_any:
                action = self._flush_freeform()
        else:
            action = self._shape_action()
            self.emit(action)
        self.mode = None
        self._points = []
        self._start = self._current = None
        return action

    def preview(self) -> Optional[DrawAction]:
        """当前未发出部分的预览（只画在屏幕上，不进入画布）"""
        if not self.active:
            return None
        if self.mode == DrawMode.FREEFORM:
            if len(self._points) < 2:
                return None
            return DrawAction.freeform(self._points, self.color, self.width)
        return self._shape_action()

    def _shape_action(self) -> DrawAction:
        if self.mode == DrawMode.LINE:
            return DrawAction.line(self._start, self._current, self.color, self.width)
        return DrawAction.box(self.mode, self._start, self._current, self.color, self.width)

    def _flush_freeform(self) -> DrawAction:
        action = DrawAction.freeform(self._points, self.color, self.width)
        self.emit(action)
        self._sent_any = True
        self._points = [self._points[-1]]
        return action


__all__ = ["GestureTracker", "FLUSH_POINTS"]
