from __future__ import annotations

import logging
from itertools import product
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from ..directions import Direction, directions_for

logger = logging.getLogger(__name__)

Point = Tuple[int, ...]


class MazeInvariantError(RuntimeError):
    """生成过程中内部不变量被破坏（尺寸/坐标运算有缺陷），不可恢复。"""


def _index(p: Point) -> Point:
    # 物理坐标 (x, y[, z]) -> 数组下标 [z, ]y, x
    return p[::-1]


def _step(p: Point, direction: Direction, distance: int) -> Point:
    return tuple(c + distance * o for c, o in zip(p, direction.offset))


def room_points(size: Sequence[int]) -> Iterator[Point]:
    """按扫描顺序（x 最快，其次 y，最后 z）枚举所有房间的物理坐标。"""

    axes = [range(1, 2 * n, 2) for n in size]
    for reversed_point in product(*reversed(axes)):
        yield reversed_point[::-1]


class _HuntAndKill:
    def __init__(self, size: Sequence[int], rng: np.random.Generator) -> None:
        self.size = tuple(int(n) for n in size)
        self.rng = rng
        self.directions = directions_for(len(self.size))
        # 房间所在的物理坐标范围为 [1, 2n-1]
        self.limits = tuple(2 * n - 1 for n in self.size)
        self.cells = np.ones(tuple(2 * n + 1 for n in reversed(self.size)), dtype=bool)

        self.walks = 0
        self.walk_steps = 0

    def _target(self, p: Point, direction: Direction) -> Optional[Point]:
        """相距两格的邻居房间；越界则返回 None（先判断再索引）。"""

        q = _step(p, direction, 2)
        for c, limit in zip(q, self.limits):
            if c < 1 or c > limit:
                return None
        return q

    def _carve_wall(self, p: Point, direction: Direction) -> None:
        self.cells[_index(_step(p, direction, 1))] = False

    def random_walk(self, start: Point) -> None:
        """Kill 阶段：从 start 出发随机游走，直到四周没有未访问房间。"""

        self.walks += 1
        current: Optional[Point] = start
        while current is not None:
            self.cells[_index(current)] = False
            nxt: Optional[Point] = None
            # 随机顺序中第一个可走方向胜出，不再比较其他方向
            for direction in self.directions.random_order(self.rng):
                target = self._target(current, direction)
                if target is not None and self.cells[_index(target)]:
                    self._carve_wall(current, direction)
                    nxt = target
                    break
            if nxt is not None:
                self.walk_steps += 1
            current = nxt

    def hunt(self, room: Point) -> None:
        """Hunt 阶段：把未访问房间与一个已访问邻居连通。"""

        for direction in self.directions.random_order(self.rng):
            target = self._target(room, direction)
            if target is not None and not self.cells[_index(target)]:
                self._carve_wall(room, direction)
                return
        raise MazeInvariantError(f"房间 {room} 没有任何已访问的邻居")

    def run(self) -> np.ndarray:
        start = tuple(1 for _ in self.size)
        self.random_walk(start)

        # 扫描顺序中排在当前房间之前的房间都已访问，因此一次正向扫描即可覆盖全部房间
        for room in room_points(self.size):
            if not self.cells[_index(room)]:
                continue
            self.hunt(room)
            self.random_walk(room)

        logger.debug(
            "hunt_and_kill size=%s walks=%d walk_steps=%d",
            self.size,
            self.walks,
            self.walk_steps,
        )
        return self.cells


def hunt_and_kill(size: Sequence[int], rng: np.random.Generator) -> np.ndarray:
    """使用 hunt-and-kill 算法生成完美迷宫的占据数组。

    参数
    ------
    size: (width, height) 或 (width, height, depth)
        逻辑房间数量。
    rng: np.random.Generator
        随机源，仅用于打乱方向顺序。

    返回
    ------
    cells: np.ndarray[bool]
        二维时按 [y, x]、三维时按 [z, y, x] 索引，每个轴长度为 2n+1；
        True 表示实心（墙/未挖开），False 表示可通行。
    """

    return _HuntAndKill(size, rng).run()
