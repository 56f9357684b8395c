"""
监听端模块

负责接收其它实例发来的绘图动作。

模块组成：
- network: Listener，UDP 接收循环（Idle -> Listening -> Stopped）

使用方式：
- 入口参见 whiteboard/server/main.py（`whiteboard-listen`），只记录收到的动作
"""

from . import network

__all__ = ["network"]
