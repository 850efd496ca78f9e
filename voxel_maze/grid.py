from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

# 体素取值：0 为空，其余任意非零值都视为不透明体素，取值本身即合并值
EMPTY = 0
FULL = 1

Point3 = Tuple[int, int, int]


@dataclass
class VoxelGrid:
    """线性化存储的三维体素数组。

    shape = (sx, sy, sz)，分别对应 x, y, z 方向尺寸。
    data 为一维 uint8 数组，坐标 (x, y, z) 对应下标 x + sx * (y + sy * z)，
    即 x 变化最快。
    """

    data: np.ndarray
    shape: Tuple[int, int, int]

    def __post_init__(self) -> None:
        self.shape = tuple(int(s) for s in self.shape)
        if len(self.shape) != 3 or min(self.shape) <= 0:
            raise ValueError(f"shape 必须是三个正整数: {self.shape}")
        if self.data.ndim != 1 or self.data.size != self.size:
            raise ValueError(
                f"data 必须是长度为 {self.size} 的一维数组，实际为 {self.data.shape}"
            )
        if self.data.dtype != np.uint8:
            self.data = self.data.astype(np.uint8)

    @property
    def size(self) -> int:
        sx, sy, sz = self.shape
        return sx * sy * sz

    def linearize(self, p: Point3) -> int:
        sx, sy, _ = self.shape
        x, y, z = p
        return x + sx * (y + sy * z)

    def delinearize(self, index: int) -> Point3:
        sx, sy, _ = self.shape
        x = index % sx
        rest = index // sx
        return x, rest % sy, rest // sy

    def in_bounds(self, p: Point3) -> bool:
        return all(0 <= c < s for c, s in zip(p, self.shape))

    def get(self, p: Point3) -> int:
        return int(self.data[self.linearize(p)])

    def set(self, p: Point3, value: int) -> None:
        self.data[self.linearize(p)] = value

    def is_solid(self, p: Point3) -> bool:
        return self.get(p) != EMPTY

    def is_empty(self, p: Point3) -> bool:
        return self.get(p) == EMPTY

    def count_solid(self, region: Optional[Tuple[Point3, Point3]] = None) -> int:
        """统计非空体素个数。

        region 为 (min, max) 闭区间；缺省时统计整个数组。
        """

        if region is None:
            return int(np.count_nonzero(self.data))
        (x0, y0, z0), (x1, y1, z1) = region
        block = self.as_array()[x0 : x1 + 1, y0 : y1 + 1, z0 : z1 + 1]
        return int(np.count_nonzero(block))

    def as_array(self) -> np.ndarray:
        """返回按 [x, y, z] 索引的三维视图（与 data 共享内存）。"""

        sx, sy, sz = self.shape
        return self.data.reshape((sz, sy, sx)).transpose(2, 1, 0)

    @classmethod
    def empty(cls, shape: Tuple[int, int, int]) -> "VoxelGrid":
        """构造一个全部为空的网格。"""

        sx, sy, sz = (int(s) for s in shape)
        return cls(data=np.zeros(sx * sy * sz, dtype=np.uint8), shape=(sx, sy, sz))

    def clone(self) -> "VoxelGrid":
        return VoxelGrid(self.data.copy(), self.shape)
