"""
绘图动作与报文编解码

每个数据报承载一个 DrawAction，使用固定布局的二进制格式（网络字节序）：

    header: magic (2 bytes) | version (1) | mode (1) | r | g | b (1 each) | width (1) | body_len (2)
    body:   LINE 与矩形/椭圆类:  x1 y1 x2 y2 (signed 16-bit each)
            FREEFORM:             count (2), 然后 count 个 (x, y)
            CLEAR:                空

版本号与显式的 body_len 让解码端在遇到更新版本新增的模式标签时，
可以安全地拒绝报文，而不会错误地解释字段。
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Sequence, Tuple

from whiteboard.shared.constants import (
    COORD_MAX,
    COORD_MIN,
    DEFAULT_LINE_WIDTH,
    HEADER_FORMAT,
    MAX_FREEFORM_POINTS,
    MAX_LINE_WIDTH,
    MAX_PAYLOAD_SIZE,
    MIN_LINE_WIDTH,
    POINT_COUNT_FORMAT,
    POINT_FORMAT,
    SEGMENT_FORMAT,
    WIRE_MAGIC,
    WIRE_VERSION,
    BLACK,
)
from whiteboard.shared.errors import DecodeError

Color = Tuple[int, int, int]
Point = Tuple[int, int]

HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
SEGMENT_SIZE = struct.calcsize(SEGMENT_FORMAT)
POINT_COUNT_SIZE = struct.calcsize(POINT_COUNT_FORMAT)
POINT_SIZE = struct.calcsize(POINT_FORMAT)


class DrawMode(IntEnum):
    """绘图模式，数值即报文中的模式标签"""

    LINE = 1
    FREEFORM = 2
    RECTANGLE = 3
    FILLED_RECTANGLE = 4
    ELLIPSE = 5
    FILLED_ELLIPSE = 6
    CLEAR = 7

    @property
    def is_box(self) -> bool:
        """几何为包围盒（两个对角点）的模式"""
        return self in _BOX_MODES

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


_BOX_MODES = frozenset(
    {DrawMode.RECTANGLE, DrawMode.FILLED_RECTANGLE, DrawMode.ELLIPSE, DrawMode.FILLED_ELLIPSE}
)


@dataclass(frozen=True)
class DrawAction:
    """
    一次可复制的原子绘图操作。

    - LINE: points 为 (起点, 终点)
    - 矩形/椭圆类: points 为包围盒的两个对角点
    - FREEFORM: 1..MAX_FREEFORM_POINTS 个点
    - CLEAR: 没有点，color 为清屏后的底色
    """

    mode: DrawMode
    color: Color = BLACK
    width: int = DEFAULT_LINE_WIDTH
    points: Tuple[Point, ...] = ()

    def __post_init__(self) -> None:
        try:
            mode = DrawMode(self.mode)
        except ValueError:
            raise ValueError(f"unknown draw mode: {self.mode!r}") from None
        try:
            color = tuple(self.color)
        except TypeError:
            raise ValueError(f"invalid color: {self.color!r}") from None
        if len(color) != 3 or not all(_is_int(c) and 0 <= c <= 255 for c in color):
            raise ValueError(f"invalid color: {self.color!r}")
        if not _is_int(self.width) or not MIN_LINE_WIDTH <= self.width <= MAX_LINE_WIDTH:
            raise ValueError(f"line width out of range: {self.width!r}")
        points = tuple(_coerce_point(p) for p in self.points)
        _check_point_count(mode, len(points))
        # frozen dataclass: 规范化后的字段需要绕过 __setattr__
        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "color", color)
        object.__setattr__(self, "points", points)

    # 便捷构造
    @classmethod
    def line(cls, start: Point, end: Point, color: Color = BLACK, width: int = DEFAULT_LINE_WIDTH) -> "DrawAction":
        return cls(DrawMode.LINE, color, width, (start, end))

    @classmethod
    def freeform(cls, points: Iterable[Point], color: Color = BLACK, width: int = DEFAULT_LINE_WIDTH) -> "DrawAction":
        return cls(DrawMode.FREEFORM, color, width, tuple(points))

    @classmethod
    def box(
        cls, mode: DrawMode, corner: Point, opposite: Point, color: Color = BLACK, width: int = DEFAULT_LINE_WIDTH
    ) -> "DrawAction":
        if not DrawMode(mode).is_box:
            raise ValueError(f"{DrawMode(mode).name} is not a bounding-box mode")
        return cls(mode, color, width, (corner, opposite))

    @classmethod
    def clear(cls, color: Color) -> "DrawAction":
        return cls(DrawMode.CLEAR, color, MIN_LINE_WIDTH, ())

    def to_bytes(self) -> bytes:
        return ActionCodec.encode(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DrawAction":
        return ActionCodec.decode(data)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce_point(p) -> Point:
    try:
        x, y = p
    except (TypeError, ValueError):
        raise ValueError(f"invalid point: {p!r}") from None
    if not (_is_int(x) and _is_int(y)):
        raise ValueError(f"point coordinates must be integers: {p!r}")
    if not (COORD_MIN <= x <= COORD_MAX and COORD_MIN <= y <= COORD_MAX):
        raise ValueError(f"point out of range: {p!r}")
    return (x, y)


def _check_point_count(mode: DrawMode, n: int) -> None:
    if mode == DrawMode.CLEAR:
        if n != 0:
            raise ValueError("CLEAR takes no points")
    elif mode == DrawMode.FREEFORM:
        if not 1 <= n <= MAX_FREEFORM_POINTS:
            raise ValueError(f"FREEFORM takes 1..{MAX_FREEFORM_POINTS} points, got {n}")
    elif n != 2:
        raise ValueError(f"{mode.name} takes exactly 2 points, got {n}")


class ActionCodec:
    """DrawAction <-> 数据报载荷"""

    @staticmethod
    def encode(action: DrawAction) -> bytes:
        """编码一个合法的 DrawAction；对合法输入总是成功且结果确定"""
        mode = action.mode
        if mode == DrawMode.CLEAR:
            body = b""
        elif mode == DrawMode.FREEFORM:
            parts = [struct.pack(POINT_COUNT_FORMAT, len(action.points))]
            parts.extend(struct.pack(POINT_FORMAT, x, y) for x, y in action.points)
            body = b"".join(parts)
        else:
            (x1, y1), (x2, y2) = action.points
            body = struct.pack(SEGMENT_FORMAT, x1, y1, x2, y2)
        r, g, b = action.color
        header = struct.pack(HEADER_FORMAT, WIRE_MAGIC, WIRE_VERSION, int(mode), r, g, b, action.width, len(body))
        return header + body

    @staticmethod
    def decode(data: bytes) -> DrawAction:
        """
        解码数据报载荷。截断、多余字节、未知模式标签、越界的线宽
        或几何数据不合法时抛出 DecodeError；不会产生其它异常。
        """
        data = bytes(data)
        if len(data) > MAX_PAYLOAD_SIZE:
            raise DecodeError(f"payload too large ({len(data)} bytes)")
        if len(data) < HEADER_SIZE:
            raise DecodeError(f"truncated header ({len(data)} of {HEADER_SIZE} bytes)")

        magic, version, tag, r, g, b, width, body_len = struct.unpack_from(HEADER_FORMAT, data)
        if magic != WIRE_MAGIC:
            raise DecodeError(f"bad magic {magic!r}")
        if version != WIRE_VERSION:
            raise DecodeError(f"unsupported wire version {version}")
        actual = len(data) - HEADER_SIZE
        if actual < body_len:
            raise DecodeError(f"truncated body ({actual} of {body_len} bytes)")
        if actual > body_len:
            raise DecodeError(f"{actual - body_len} trailing bytes after body")
        try:
            mode = DrawMode(tag)
        except ValueError:
            raise DecodeError(f"unknown draw mode tag {tag}") from None
        if not MIN_LINE_WIDTH <= width <= MAX_LINE_WIDTH:
            raise DecodeError(f"line width out of range: {width}")

        body = data[HEADER_SIZE:]
        points = _decode_body(mode, body)
        try:
            return DrawAction(mode, (r, g, b), width, points)
        except ValueError as exc:
            raise DecodeError(str(exc)) from exc


def _decode_body(mode: DrawMode, body: bytes) -> Sequence[Point]:
    if mode == DrawMode.CLEAR:
        if body:
            raise DecodeError("CLEAR carries no body")
        return ()
    if mode == DrawMode.FREEFORM:
        if len(body) < POINT_COUNT_SIZE:
            raise DecodeError("truncated point count")
        (count,) = struct.unpack_from(POINT_COUNT_FORMAT, body)
        if not 1 <= count <= MAX_FREEFORM_POINTS:
            raise DecodeError(f"invalid point count {count}")
        expected = POINT_COUNT_SIZE + count * POINT_SIZE
        if len(body) != expected:
            raise DecodeError(f"point list length mismatch ({len(body)} != {expected})")
        return tuple(struct.iter_unpack(POINT_FORMAT, body[POINT_COUNT_SIZE:]))
    if len(body) != SEGMENT_SIZE:
        raise DecodeError(f"{mode.name} body must be {SEGMENT_SIZE} bytes, got {len(body)}")
    x1, y1, x2, y2 = struct.unpack(SEGMENT_FORMAT, body)
    return ((x1, y1), (x2, y2))


__all__ = [
    "ActionCodec",
    "Color",
    "DrawAction",
    "DrawMode",
    "HEADER_SIZE",
    "Point",
]
