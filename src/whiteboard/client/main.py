"""
客户端主程序入口

启动白板窗口与 UDP 监听，本地绘制的动作同步给所有已知节点。
"""

import logging
import sys
from typing import List, Optional

import pygame

from whiteboard.client.game import WhiteboardSession
from whiteboard.client.ui import GestureTracker, Toolbar, WhiteboardCanvas, draw_action
from whiteboard.shared.config import load_settings
from whiteboard.shared.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    FPS,
    LOG_FORMAT,
    TOOLBAR_HEIGHT,
    WINDOW_HEIGHT,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)
from whiteboard.shared.errors import BindError
from whiteboard.shared.protocols import DrawAction, DrawMode

logger = logging.getLogger(__name__)


def log_draw_modes() -> None:
    """打印可用的绘图模式"""
    logger.info("Drawing Modes:")
    for mode in DrawMode:
        logger.info("  %d: %s", mode.value, mode.label)


def main(argv: Optional[List[str]] = None) -> int:
    """Start the whiteboard window and run the main loop."""
    settings = load_settings(argv, prog="whiteboard")
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    logger.info("%s", "=" * 50)
    logger.info("Distributed Whiteboard 启动中...")
    logger.info("%s", "=" * 50)
    log_draw_modes()

    pygame.init()
    canvas = WhiteboardCanvas(CANVAS_WIDTH, CANVAS_HEIGHT)
    session = WhiteboardSession.from_settings(canvas, settings)
    try:
        session.start(settings.port, settings.host)
    except BindError as exc:
        logger.error("无法监听端口 %d，请选择其它端口: %s", settings.port, exc)
        pygame.quit()
        return 1

    try:
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(f"{WINDOW_TITLE} - {session.directory.self_endpoint}")
        clock = pygame.time.Clock()

        toolbar = Toolbar(
            pygame.Rect(0, CANVAS_HEIGHT, WINDOW_WIDTH, TOOLBAR_HEIGHT),
            on_clear=lambda: session.draw(DrawAction.clear(canvas.background)),
        )
        gesture = GestureTracker(session.draw)
        canvas_rect = pygame.Rect(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break
                if toolbar.handle_event(event) and not gesture.active:
                    continue
                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if canvas_rect.collidepoint(event.pos):
                        gesture.begin(toolbar.mode, event.pos, toolbar.color, toolbar.width)
                elif event.type == pygame.MOUSEMOTION and gesture.active:
                    gesture.move(event.pos)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    gesture.end(event.pos)

            screen.fill((255, 255, 255))
            canvas.render(screen, canvas_rect.topleft)
            # 拖动中的形状只画在屏幕上
            preview = gesture.preview()
            if preview is not None:
                draw_action(screen, preview)
            toolbar.draw(screen)
            pygame.display.flip()
            clock.tick(FPS)
    except Exception as exc:  # pragma: no cover - main runtime errors
        logger.error("客户端错误: %s", exc, exc_info=True)
        return 1
    finally:
        session.stop()
        pygame.quit()
        logger.info("客户端已关闭")
    return 0


if __name__ == "__main__":
    sys.exit(main())
