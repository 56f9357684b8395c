"""
客户端模块

负责白板界面、用户交互与发送端网络通信。

模块组成：
- network: Broadcaster，逐节点 UDP 发送绘图动作
- game: WhiteboardSession，组合画布、发送端与监听端
- ui: UI 组件（画布、工具栏、按钮、手势）

入口提示：
- 运行 `whiteboard`（或 python -m whiteboard.client.main）启动 Pygame 客户端
- 与其它实例通信基于单数据报二进制报文（见 whiteboard.shared.protocols）
"""

from . import game, network, ui

__all__ = ["game", "network", "ui"]
