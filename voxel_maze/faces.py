from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Vec3 = Tuple[int, int, int]

# 轴排列 (n, u, v)：n 为法线轴，u / v 为面内两个轴
XZY: Tuple[int, int, int] = (0, 2, 1)
YZX: Tuple[int, int, int] = (1, 2, 0)
ZXY: Tuple[int, int, int] = (2, 0, 1)


def _unit(axis: int) -> Vec3:
    v = [0, 0, 0]
    v[axis] = 1
    return v[0], v[1], v[2]


def permutation_sign(permutation: Tuple[int, int, int]) -> int:
    """轴排列的奇偶性：偶排列 +1，奇排列 -1。"""

    inversions = 0
    for i in range(3):
        for j in range(i + 1, 3):
            if permutation[i] > permutation[j]:
                inversions += 1
    return 1 if inversions % 2 == 0 else -1


@dataclass(frozen=True)
class UnorientedQuad:
    """贪心合并得到的矩形面片。

    minimum 为面片最小角所在体素坐标；width 沿 u 轴，height 沿 v 轴。
    """

    minimum: Vec3
    width: int
    height: int


@dataclass(frozen=True)
class OrientedBlockFace:
    """体素的一个朝向面：法线符号 + 轴排列。

    负向面的四个角位于体素最小角所在平面；正向面整体沿法线平移一格。
    三角形绕序由 n_sign 与排列奇偶性共同决定，保证六个方向的法线都朝外。
    """

    n_sign: int
    permutation: Tuple[int, int, int]
    n: Vec3 = field(init=False)
    u: Vec3 = field(init=False)
    v: Vec3 = field(init=False)

    def __post_init__(self) -> None:
        if self.n_sign not in (-1, 1):
            raise ValueError(f"n_sign 只能为 ±1，收到 {self.n_sign}")
        n_axis, u_axis, v_axis = self.permutation
        object.__setattr__(self, "n", _unit(n_axis))
        object.__setattr__(self, "u", _unit(u_axis))
        object.__setattr__(self, "v", _unit(v_axis))

    @property
    def signed_normal(self) -> Vec3:
        return (self.n[0] * self.n_sign, self.n[1] * self.n_sign, self.n[2] * self.n_sign)

    @property
    def counter_clockwise(self) -> bool:
        return self.n_sign * permutation_sign(self.permutation) > 0

    def quad_corners(self, quad: UnorientedQuad) -> List[Vec3]:
        """返回 [minu_minv, maxu_minv, minu_maxv, maxu_maxv] 四个角点。"""

        base = quad.minimum
        if self.n_sign > 0:
            base = (base[0] + self.n[0], base[1] + self.n[1], base[2] + self.n[2])
        w = [c * quad.width for c in self.u]
        h = [c * quad.height for c in self.v]
        minu_minv = base
        maxu_minv = (base[0] + w[0], base[1] + w[1], base[2] + w[2])
        minu_maxv = (base[0] + h[0], base[1] + h[1], base[2] + h[2])
        maxu_maxv = (maxu_minv[0] + h[0], maxu_minv[1] + h[1], maxu_minv[2] + h[2])
        return [minu_minv, maxu_minv, minu_maxv, maxu_maxv]

    def quad_mesh_positions(
        self, quad: UnorientedQuad, voxel_size: float = 1.0
    ) -> List[Tuple[float, float, float]]:
        return [
            (voxel_size * x, voxel_size * y, voxel_size * z)
            for x, y, z in self.quad_corners(quad)
        ]

    def quad_mesh_normals(self) -> List[Tuple[float, float, float]]:
        nx, ny, nz = self.signed_normal
        return [(float(nx), float(ny), float(nz))] * 4

    def quad_mesh_indices(self, start: int) -> List[int]:
        if self.counter_clockwise:
            return [start, start + 1, start + 2, start + 1, start + 3, start + 2]
        return [start, start + 2, start + 1, start + 1, start + 2, start + 3]


# 右手系、Y 轴向上：-X, -Y, -Z, +X, +Y, +Z
RIGHT_HANDED_Y_UP_FACES: Tuple[OrientedBlockFace, ...] = (
    OrientedBlockFace(-1, XZY),
    OrientedBlockFace(-1, YZX),
    OrientedBlockFace(-1, ZXY),
    OrientedBlockFace(1, XZY),
    OrientedBlockFace(1, YZX),
    OrientedBlockFace(1, ZXY),
)
