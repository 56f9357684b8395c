import pygame
from typing import Callable, Optional, Tuple


class Button:
    """
    A toolbar button.

    Either shows a text label or, when `swatch` is given, a filled color
    square. `selected` draws a thicker border so the current mode, color
    and width are visible at a glance.
    """

    def __init__(
        self,
        rect: pygame.Rect,
        text: str = "",
        bg_color=(235, 235, 235),
        fg_color=(20, 20, 20),
        hover_bg_color: Optional[tuple] = (215, 215, 215),
        swatch: Optional[Tuple[int, int, int]] = None,
        font_size=18,
        on_click: Optional[Callable[[], None]] = None,
    ):
        self.rect = pygame.Rect(rect)
        self.text = text
        self.bg_color = bg_color
        self.fg_color = fg_color
        self.hover_bg_color = hover_bg_color
        self.swatch = swatch
        # 按钮状态
        self.pressed: bool = False
        self.hovered: bool = False
        self.selected: bool = False
        # 点击回调（可选）
        self.on_click: Optional[Callable[[], None]] = on_click

        self.font = pygame.font.Font(None, font_size)
        self.text_surface = self.font.render(text, True, self.fg_color)
        self.text_rect = self.text_surface.get_rect(center=self.rect.center)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Handle pygame mouse events; returns True when the event was a click on this button.

        - MOUSEMOTION: update hovered state
        - MOUSEBUTTONDOWN (left): set pressed True when hovered
        - MOUSEBUTTONUP (left): if was pressed and still hovered, trigger click
        """
        if event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.pressed = True
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            if self.pressed:
                self.pressed = False
                if self.rect.collidepoint(event.pos):
                    if self.on_click:
                        self.on_click()
                    return True
        return False

    def draw(self, screen: pygame.Surface) -> None:
        current_bg = self.bg_color
        if self.hovered and self.hover_bg_color:
            current_bg = self.hover_bg_color
        if self.pressed:
            # 按下时背景略微加深
            current_bg = tuple(max(0, c - 20) for c in current_bg)

        pygame.draw.rect(screen, current_bg, self.rect, border_radius=6)
        if self.swatch is not None:
            pygame.draw.rect(screen, self.swatch, self.rect.inflate(-10, -10), border_radius=4)
        else:
            screen.blit(self.text_surface, self.text_rect)
        border = 3 if self.selected else 1
        pygame.draw.rect(screen, (60, 60, 60) if self.selected else (120, 120, 120), self.rect, border, border_radius=6)

    def update_text(self, new_text: str) -> None:
        """Update the button's text and re-render the surface."""
        self.text = new_text
        self.text_surface = self.font.render(new_text, True, self.fg_color)
        self.text_rect = self.text_surface.get_rect(center=self.rect.center)
