"""
共享模块

存放发送端与监听端共用的代码。

组件说明：
- constants: 网络端口、报文格式常量、窗口参数、调色板
- errors: 同步层异常（ResolutionError / TransportError / DecodeError / BindError）
- peers: Endpoint 与静态对等节点目录 PeerDirectory
- protocols: DrawAction 数据模型与固定布局的二进制编解码 ActionCodec
- config: 启动配置加载（settings.json、环境变量、命令行）

提示：
- 一个数据报只承载一个 DrawAction，载荷不超过 MAX_PAYLOAD_SIZE
"""

from . import config, constants, errors, peers, protocols

__all__ = ["config", "constants", "errors", "peers", "protocols"]
