from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Integral
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .algorithms.hunt_and_kill import MazeInvariantError, hunt_and_kill, room_points
from .directions import Direction, directions_for

logger = logging.getLogger(__name__)

__all__ = ["MazeGrid", "MazeInvariantError", "generate"]

Point = Tuple[int, ...]


@dataclass
class MazeGrid:
    """二维 / 三维迷宫的占据网格。

    cells 在二维时按 [y, x]、三维时按 [z, y, x] 索引，每个轴的物理长度为 2n+1。
    True 表示实心（墙或未挖开），False 表示可通行。

    坐标约定：
    - 逻辑房间坐标 (i, j[, k]) 取值 0..n-1；
    - 物理坐标 (x, y[, z]) 中奇数坐标为房间，偶数坐标为墙；
    - 逻辑房间 i 对应物理坐标 2i+1。
    """

    cells: np.ndarray
    width: int
    height: int
    depth: Optional[int] = None

    def __post_init__(self) -> None:
        expected = tuple(2 * n + 1 for n in reversed(self.size))
        if self.cells.shape != expected:
            raise ValueError(f"cells 形状应为 {expected}，实际为 {self.cells.shape}")
        if self.cells.dtype != np.bool_:
            self.cells = self.cells.astype(np.bool_)

    @property
    def ndim(self) -> int:
        return 2 if self.depth is None else 3

    @property
    def size(self) -> Tuple[int, ...]:
        """逻辑尺寸 (width, height[, depth])。"""

        if self.depth is None:
            return (self.width, self.height)
        return (self.width, self.height, self.depth)

    @property
    def physical_size(self) -> Tuple[int, ...]:
        return tuple(2 * n + 1 for n in self.size)

    @property
    def num_rooms(self) -> int:
        return int(np.prod(self.size))

    def is_solid(self, point: Point) -> bool:
        return bool(self.cells[tuple(point)[::-1]])

    def is_walkable(self, point: Point) -> bool:
        return not self.is_solid(point)

    def room_to_physical(self, room: Point) -> Point:
        return tuple(2 * i + 1 for i in room)

    def physical_to_room(self, point: Point) -> Point:
        if any(c % 2 == 0 for c in point):
            raise ValueError(f"{point} 不是房间坐标（房间坐标必须全为奇数）")
        return tuple((c - 1) // 2 for c in point)

    def rooms(self) -> Iterator[Point]:
        """按扫描顺序枚举所有逻辑房间坐标。"""

        for p in room_points(self.size):
            yield self.physical_to_room(p)

    def contains_room(self, room: Point) -> bool:
        return len(room) == self.ndim and all(0 <= i < n for i, n in zip(room, self.size))

    def passage_open(self, room: Point, direction: Direction) -> bool:
        """room 与 direction 方向相邻房间之间的墙是否已挖开。"""

        neighbor = tuple(i + o for i, o in zip(room, direction.offset))
        if not self.contains_room(neighbor):
            return False
        wall = tuple(2 * i + 1 + o for i, o in zip(room, direction.offset))
        return self.is_walkable(wall)

    def neighbors(self, room: Point) -> List[Point]:
        """与 room 之间有通道相连的房间列表（按方向声明顺序）。"""

        result: List[Point] = []
        for direction in directions_for(self.ndim):
            if self.passage_open(room, direction):
                result.append(tuple(i + o for i, o in zip(room, direction.offset)))
        return result


def _check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ValueError(f"{name} 必须是正整数，收到 {value!r}")
    if value <= 0:
        raise ValueError(f"{name} 必须是正整数，收到 {value}")
    return int(value)


def generate(
    width: int,
    height: int,
    depth: Optional[int] = None,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> MazeGrid:
    """生成完美迷宫的唯一入口。

    depth 为 None 时生成二维迷宫，否则生成三维迷宫。rng 优先于 seed；
    两者都缺省时使用未固定种子的随机源。
    """

    width = _check_dimension("width", width)
    height = _check_dimension("height", height)
    if depth is not None:
        depth = _check_dimension("depth", depth)

    if rng is None:
        rng = np.random.default_rng(seed)

    size = (width, height) if depth is None else (width, height, depth)
    cells = hunt_and_kill(size, rng)
    maze = MazeGrid(cells=cells, width=width, height=height, depth=depth)

    logger.debug("generated %dD maze size=%s rooms=%d", maze.ndim, size, maze.num_rooms)
    return maze
