"""
Distributed Whiteboard - 分布式白板

Several instances of a drawing application kept in sync over UDP,
built with Python and Pygame.
"""

import importlib

__version__ = "0.1.0"
__author__ = "Distributed Whiteboard Team"
__license__ = "MIT"

# 子包按需导入：无界面的监听端与编解码不应加载 pygame
_SUBPACKAGES = ("client", "server", "shared")


def __getattr__(name):
    if name in _SUBPACKAGES:
        return importlib.import_module(f"{__name__}.{name}")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["client", "server", "shared", "__version__"]
