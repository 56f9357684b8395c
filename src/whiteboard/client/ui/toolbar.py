"""
工具栏：选择绘图模式、颜色和线宽，以及清空画布。
"""

from typing import Callable, List, Optional, Tuple

import pygame

from whiteboard.shared.constants import DEFAULT_LINE_WIDTH, LINE_WIDTHS, PALETTE
from whiteboard.shared.protocols import DrawMode

from .button import Button

ROW_GAP = 4
BUTTON_H = 26

DRAWING_MODES = [m for m in DrawMode if m != DrawMode.CLEAR]


class Toolbar:
    """两行工具栏：上行为模式与清屏，下行为调色板与线宽"""

    def __init__(self, rect: pygame.Rect, on_clear: Optional[Callable[[], None]] = None):
        self.rect = pygame.Rect(rect)
        self.mode: DrawMode = DrawMode.FREEFORM
        self.color: Tuple[int, int, int] = PALETTE[0]
        self.width: int = DEFAULT_LINE_WIDTH if DEFAULT_LINE_WIDTH in LINE_WIDTHS else LINE_WIDTHS[0]
        self.on_clear = on_clear

        self._mode_buttons: List[Tuple[DrawMode, Button]] = []
        self._color_buttons: List[Tuple[Tuple[int, int, int], Button]] = []
        self._width_buttons: List[Tuple[int, Button]] = []
        self._buttons: List[Button] = []
        self._layout()
        self._refresh_selection()

    def _layout(self) -> None:
        x0 = self.rect.left + 6
        top = self.rect.top + ROW_GAP
        bottom = top + BUTTON_H + ROW_GAP

        # 上行：模式按钮 + 清屏
        x = x0
        for mode in DRAWING_MODES:
            btn = Button(pygame.Rect(x, top, 104, BUTTON_H), mode.label)
            btn.on_click = self._make_setter("mode", mode)
            self._mode_buttons.append((mode, btn))
            x += 104 + 4
        clear_btn = Button(pygame.Rect(x + 8, top, 70, BUTTON_H), "Clear", on_click=self._clear)
        self._buttons.append(clear_btn)

        # 下行：调色板 + 线宽
        x = x0
        for color in PALETTE:
            btn = Button(pygame.Rect(x, bottom, BUTTON_H, BUTTON_H), swatch=color)
            btn.on_click = self._make_setter("color", color)
            self._color_buttons.append((color, btn))
            x += BUTTON_H + 4
        x += 16
        for w in LINE_WIDTHS:
            btn = Button(pygame.Rect(x, bottom, 44, BUTTON_H), f"{w}px")
            btn.on_click = self._make_setter("width", w)
            self._width_buttons.append((w, btn))
            x += 44 + 4

        for group in (self._mode_buttons, self._color_buttons, self._width_buttons):
            self._buttons.extend(btn for _, btn in group)

    def _make_setter(self, attr: str, value) -> Callable[[], None]:
        def _set() -> None:
            setattr(self, attr, value)
            self._refresh_selection()

        return _set

    def _clear(self) -> None:
        if self.on_clear:
            self.on_clear()

    def _refresh_selection(self) -> None:
        for mode, btn in self._mode_buttons:
            btn.selected = mode == self.mode
        for color, btn in self._color_buttons:
            btn.selected = color == self.color
        for w, btn in self._width_buttons:
            btn.selected = w == self.width

    def handle_event(self, event: pygame.event.Event) -> bool:
        """处理事件；若事件落在工具栏上则返回 True（画布不再处理）"""
        consumed = False
        for btn in self._buttons:
            if btn.handle_event(event):
                consumed = True
        pos = getattr(event, "pos", None)
        if pos is not None and event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            consumed = consumed or self.rect.collidepoint(pos)
        return consumed

    def draw(self, screen: pygame.Surface) -> None:
        pygame.draw.rect(screen, (245, 245, 245), self.rect)
        pygame.draw.line(screen, (180, 180, 180), self.rect.topleft, self.rect.topright)
        for btn in self._buttons:
            btn.draw(screen)


__all__ = ["Toolbar", "DRAWING_MODES"]
