"""
无界面监听入口

只启动 UDP 监听，把收到的每个绘图动作写入日志，便于调试对等节点之间的同步。
"""

import logging
import sys
import time
from typing import List, Optional

from whiteboard.server.network import Listener
from whiteboard.shared.config import load_settings
from whiteboard.shared.constants import LOG_FORMAT
from whiteboard.shared.errors import BindError
from whiteboard.shared.protocols import DrawAction

logger = logging.getLogger(__name__)


class LoggingSurface:
    """只记录、不绘制的渲染表面"""

    def __init__(self) -> None:
        self.count = 0

    def apply_action(self, action: DrawAction) -> None:
        self.count += 1
        logger.info(
            "#%d %s color=%s width=%d points=%s",
            self.count,
            action.mode.name,
            action.color,
            action.width,
            list(action.points),
        )


def main(argv: Optional[List[str]] = None) -> int:
    """启动监听主函数"""
    settings = load_settings(argv, prog="whiteboard-listen")
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, handlers=handlers)

    logger.info("=" * 50)
    logger.info("监听地址: %s:%d", settings.bind_host, settings.port)
    logger.info("=" * 50)

    listener = Listener(LoggingSurface().apply_action, host=settings.bind_host)
    try:
        listener.start(settings.port)
    except BindError as exc:
        logger.error("无法监听端口 %d，请选择其它端口: %s", settings.port, exc)
        return 1

    logger.info("监听中，按 Ctrl+C 停止")
    try:
        while listener.listening:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("正在关闭...")
    finally:
        listener.stop()
        logger.info(
            "已停止: 收到 %d, 应用 %d, 丢弃 %d", listener.received, listener.applied, listener.rejected
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
