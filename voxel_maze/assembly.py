from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .algorithms.greedy_quads import greedy_quads, mesh_buffers
from .faces import RIGHT_HANDED_Y_UP_FACES
from .grid import VoxelGrid
from .maze import MazeGrid
from .voxelize import BoxCollider, cell_to_voxel, extraction_bounds, voxelize

logger = logging.getLogger(__name__)

# 迷宫整体的统一缩放
MAZE_SCALE = 5.0

Vec3f = Tuple[float, float, float]


@dataclass
class AssemblyParams:
    """网格组装参数。"""

    scale: float = MAZE_SCALE
    half_extent: float = 2.5  # 水平方向的居中偏移（以体素为单位，乘以 scale）


@dataclass
class Transform:
    """均匀缩放 + 平移，world = local * scale + translation。"""

    translation: Vec3f = (0.0, 0.0, 0.0)
    scale: float = 1.0

    def apply(self, points: np.ndarray) -> np.ndarray:
        pts = np.asarray(points, dtype=np.float64)
        return pts * self.scale + np.asarray(self.translation, dtype=np.float64)


@dataclass
class MazeMesh:
    """可直接交给渲染端的三角网格。UV 全为 0（本模块不处理贴图）。"""

    positions: np.ndarray  # float32, (N, 3)
    normals: np.ndarray    # float32, (N, 3)
    uvs: np.ndarray        # float32, (N, 2)
    indices: np.ndarray    # uint32, (M,)

    @property
    def num_vertices(self) -> int:
        return len(self.positions)

    @property
    def num_quads(self) -> int:
        return self.num_vertices // 4

    @property
    def num_triangles(self) -> int:
        return len(self.indices) // 3

    def triangles(self) -> np.ndarray:
        return self.indices.reshape(-1, 3)

    def world_positions(self, transform: Transform) -> np.ndarray:
        return transform.apply(self.positions)


@dataclass
class CompoundCollider:
    """把所有单位盒子合成一个刚体障碍集合。"""

    shapes: List[BoxCollider] = field(default_factory=list)

    @property
    def num_shapes(self) -> int:
        return len(self.shapes)

    def centers(self) -> np.ndarray:
        return np.asarray([s.center for s in self.shapes], dtype=np.float64).reshape(-1, 3)

    def world_boxes(self, transform: Transform) -> List[Tuple[Vec3f, Vec3f]]:
        """返回世界坐标下的 (center, half_extents) 列表。"""

        centers = transform.apply(self.centers())
        boxes: List[Tuple[Vec3f, Vec3f]] = []
        for shape, c in zip(self.shapes, centers):
            hx, hy, hz = shape.half_extents
            half = (hx * transform.scale, hy * transform.scale, hz * transform.scale)
            boxes.append(((float(c[0]), float(c[1]), float(c[2])), half))
        return boxes


@dataclass
class MazeAssets:
    """迷宫及其派生的网格、碰撞体与变换。"""

    maze: MazeGrid
    mesh: MazeMesh
    collider: CompoundCollider
    transform: Transform


def centering_transform(maze: MazeGrid, params: Optional[AssemblyParams] = None) -> Transform:
    """水平方向平移 -scale * half_extent，竖直方向二维平移 -scale、三维平移 -2 * scale。"""

    params = params or AssemblyParams()
    s = params.scale
    vertical = -s if maze.ndim == 2 else -2.0 * s
    return Transform(translation=(-s * params.half_extent, vertical, -s * params.half_extent), scale=s)


def build_mesh(grid: VoxelGrid) -> MazeMesh:
    """对整个体素数组做贪心网格化，并补上全零 UV 通道。"""

    lo, hi = extraction_bounds(grid)
    quads = greedy_quads(grid, lo, hi, RIGHT_HANDED_Y_UP_FACES)
    buffers = mesh_buffers(quads, RIGHT_HANDED_Y_UP_FACES, voxel_size=1.0)
    return MazeMesh(
        positions=buffers.positions,
        normals=buffers.normals,
        uvs=np.zeros((len(buffers.positions), 2), dtype=np.float32),
        indices=buffers.indices,
    )


def build_maze_assets(maze: MazeGrid, params: Optional[AssemblyParams] = None) -> MazeAssets:
    grid, colliders = voxelize(maze)
    mesh = build_mesh(grid)
    assets = MazeAssets(
        maze=maze,
        mesh=mesh,
        collider=CompoundCollider(shapes=colliders),
        transform=centering_transform(maze, params),
    )
    logger.debug(
        "assembled maze size=%s quads=%d colliders=%d",
        maze.size,
        mesh.num_quads,
        assets.collider.num_shapes,
    )
    return assets


def room_world_center(assets: MazeAssets, room: Tuple[int, ...]) -> Vec3f:
    """逻辑房间中心在世界坐标下的位置，可用于放置终点等物体。"""

    maze = assets.maze
    if not maze.contains_room(room):
        raise ValueError(f"房间 {room} 不在迷宫 {maze.size} 范围内")
    voxel = cell_to_voxel(maze, maze.room_to_physical(room))
    local = np.asarray([[c + 0.5 for c in voxel]], dtype=np.float64)
    x, y, z = assets.transform.apply(local)[0]
    return float(x), float(y), float(z)
