from __future__ import annotations

from enum import Enum
from typing import List, Tuple, Type, Union

import numpy as np


class Direction2D(Enum):
    """二维迷宫的移动方向，取值为物理坐标 (x, y) 上的单位偏移。"""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def offset(self) -> Tuple[int, ...]:
        return self.value

    @classmethod
    def random_order(cls, rng: np.random.Generator) -> List["Direction2D"]:
        """返回所有方向的一个均匀随机排列，每个方向恰好出现一次。"""

        members = list(cls)
        return [members[i] for i in rng.permutation(len(members))]


class Direction3D(Enum):
    """三维迷宫的移动方向，取值为物理坐标 (x, y, z) 上的单位偏移。"""

    UP = (0, -1, 0)
    DOWN = (0, 1, 0)
    LEFT = (-1, 0, 0)
    RIGHT = (1, 0, 0)
    IN = (0, 0, -1)
    OUT = (0, 0, 1)

    @property
    def offset(self) -> Tuple[int, ...]:
        return self.value

    @classmethod
    def random_order(cls, rng: np.random.Generator) -> List["Direction3D"]:
        """返回所有方向的一个均匀随机排列，每个方向恰好出现一次。"""

        members = list(cls)
        return [members[i] for i in rng.permutation(len(members))]


Direction = Union[Direction2D, Direction3D]


def directions_for(ndim: int) -> Union[Type[Direction2D], Type[Direction3D]]:
    if ndim == 2:
        return Direction2D
    if ndim == 3:
        return Direction3D
    raise ValueError(f"只支持二维或三维迷宫，收到 ndim={ndim}")
