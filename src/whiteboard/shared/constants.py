"""
常量定义

定义白板各实例之间共用的常量：网络端口、报文格式、窗口参数与调色板。
"""

# 网络配置
DEFAULT_HOST = "127.0.0.1"
DEFAULT_BIND_HOST = "0.0.0.0"
DEFAULT_PORT = 55551
# 静态对等节点列表（同一台机器上运行两个实例）
DEFAULT_PEERS = [
    ("127.0.0.1", 55551),
    ("127.0.0.1", 55552),
]
BUFFER_SIZE = 4096

# 单个 UDP 数据报的安全载荷上限，避免分片
MAX_PAYLOAD_SIZE = 512
# 接收循环的轮询间隔（秒），保证 stop() 能在有限时间内被观察到
RECV_POLL_INTERVAL = 0.25
# 停止监听时等待接收线程退出的最长时间（秒）
LISTENER_JOIN_TIMEOUT = 2.0
# 主机名解析的超时（秒）
RESOLVE_TIMEOUT = 2.0

# 报文格式
WIRE_MAGIC = b"WB"
WIRE_VERSION = 1
# magic | version | mode | r | g | b | width | body_len
HEADER_FORMAT = "!2sBBBBBBH"
# 两点几何：x1 y1 x2 y2
SEGMENT_FORMAT = "!hhhh"
POINT_COUNT_FORMAT = "!H"
POINT_FORMAT = "!hh"

# 绘图参数
MIN_LINE_WIDTH = 1
MAX_LINE_WIDTH = 64
DEFAULT_LINE_WIDTH = 3
# 120 个点的自由笔划编码后为 492 字节，低于 MAX_PAYLOAD_SIZE
MAX_FREEFORM_POINTS = 120
COORD_MIN = -32768
COORD_MAX = 32767

# 窗口配置
CANVAS_WIDTH = 800
CANVAS_HEIGHT = 800
TOOLBAR_HEIGHT = 64
WINDOW_WIDTH = CANVAS_WIDTH
WINDOW_HEIGHT = CANVAS_HEIGHT + TOOLBAR_HEIGHT
WINDOW_TITLE = "Distributed Whiteboard"
FPS = 60

# 颜色定义 (RGB)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)

# 画笔配置
LINE_WIDTHS = [1, 3, 5, 10, 20]
PALETTE = [
    BLACK,
    RED,
    GREEN,
    BLUE,
    (255, 255, 0),  # Yellow
    (255, 165, 0),  # Orange
    (128, 0, 128),  # Purple
    WHITE,
]

# 日志
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
