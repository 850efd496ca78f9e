from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .grid import FULL, VoxelGrid
from .maze import MazeGrid

Point3 = Tuple[int, int, int]
Vec3f = Tuple[float, float, float]

UNIT_HALF_EXTENTS: Vec3f = (0.5, 0.5, 0.5)


@dataclass(frozen=True)
class BoxCollider:
    """轴对齐盒子碰撞体，center 为相对网格原点的中心偏移（体素坐标系）。"""

    center: Vec3f
    half_extents: Vec3f = UNIT_HALF_EXTENTS


def voxel_shape(maze: MazeGrid) -> Point3:
    """体素数组形状：物理尺寸每个轴两侧各留一格空白。

    二维迷宫铺在 y = 1 的平面上，迷宫的 y 轴映射到体素的 z 轴。
    """

    if maze.ndim == 2:
        return (2 * maze.width + 3, 3, 2 * maze.height + 3)
    return (2 * maze.width + 3, 2 * maze.height + 3, 2 * maze.depth + 3)


def cell_to_voxel(maze: MazeGrid, point: Tuple[int, ...]) -> Point3:
    """迷宫物理坐标 -> 体素坐标（已计入 +1 的填充偏移）。"""

    if maze.ndim == 2:
        x, y = point
        return (x + 1, 1, y + 1)
    x, y, z = point
    return (x + 1, y + 1, z + 1)


def voxel_to_cell(maze: MazeGrid, voxel: Point3) -> Tuple[int, ...]:
    vx, vy, vz = voxel
    if maze.ndim == 2:
        return (vx - 1, vz - 1)
    return (vx - 1, vy - 1, vz - 1)


def extraction_bounds(grid: VoxelGrid) -> Tuple[Point3, Point3]:
    """网格提取区域（闭区间），最外一层只用于让边界面正确闭合。"""

    sx, sy, sz = grid.shape
    return (0, 0, 0), (sx - 1, sy - 1, sz - 1)


def voxelize(maze: MazeGrid) -> Tuple[VoxelGrid, List[BoxCollider]]:
    """把迷宫网格转换为带填充的体素数组，同时为每个实心格生成单位盒子碰撞体。

    遍历顺序与 cells 的行主序一致；可通行格既不写体素也不生成碰撞体。
    """

    grid = VoxelGrid.empty(voxel_shape(maze))
    colliders: List[BoxCollider] = []

    for index in np.argwhere(maze.cells):
        point = tuple(int(c) for c in index[::-1])
        voxel = cell_to_voxel(maze, point)
        grid.set(voxel, FULL)
        colliders.append(
            BoxCollider(center=(voxel[0] + 0.5, voxel[1] + 0.5, voxel[2] + 0.5))
        )

    return grid, colliders
