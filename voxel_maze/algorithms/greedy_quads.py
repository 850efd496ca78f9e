from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from ..faces import RIGHT_HANDED_Y_UP_FACES, OrientedBlockFace, UnorientedQuad
from ..grid import EMPTY, VoxelGrid

logger = logging.getLogger(__name__)

Point3 = Tuple[int, int, int]


@dataclass
class QuadBuffer:
    """按面方向分组的贪心面片结果，groups[i] 对应 faces[i]。"""

    groups: List[List[UnorientedQuad]] = field(default_factory=list)

    @property
    def num_quads(self) -> int:
        return sum(len(g) for g in self.groups)


@dataclass
class MeshBuffers:
    """面片展开后的顶点 / 法线 / 索引缓冲。"""

    positions: np.ndarray  # float32, (N, 3)
    normals: np.ndarray    # float32, (N, 3)
    indices: np.ndarray    # uint32, (6 * quads,)

    @property
    def num_quads(self) -> int:
        return len(self.positions) // 4


class _FaceScan:
    """单个朝向面上的贪心扫描，持有该面的步长与 visited 缓冲。"""

    def __init__(
        self,
        values: List[int],
        grid: VoxelGrid,
        face: OrientedBlockFace,
        visited: bytearray,
    ) -> None:
        self.values = values
        self.visited = visited
        self.n_stride = grid.linearize(face.n)
        self.u_stride = grid.linearize(face.u)
        self.v_stride = grid.linearize(face.v)
        # 沿带符号法线方向的相邻体素偏移
        self.visibility_offset = self.n_stride if face.n_sign > 0 else -self.n_stride

    def needs_mesh(self, index: int) -> bool:
        value = self.values[index]
        if value == EMPTY or self.visited[index]:
            return False
        return self.values[index + self.visibility_offset] == EMPTY

    def row_width(self, start: int, merge_value: int, max_width: int) -> int:
        width = 0
        index = start
        while width < max_width:
            if not self.needs_mesh(index):
                break
            if self.values[index] != merge_value:
                break
            width += 1
            index += self.u_stride
        return width

    def max_quad(self, start: int, max_width: int, max_height: int) -> Tuple[int, int]:
        """先沿 u 取最长行，再沿 v 逐行扩展，要求每行都能覆盖完整宽度。"""

        merge_value = self.values[start]
        width = self.row_width(start, merge_value, max_width)
        height = 1
        row_start = start + self.v_stride
        while height < max_height:
            if self.row_width(row_start, merge_value, width) < width:
                break
            height += 1
            row_start += self.v_stride
        return width, height

    def mark_visited(self, start: int, width: int, height: int) -> None:
        row_start = start
        for _ in range(height):
            index = row_start
            for _ in range(width):
                self.visited[index] = 1
                index += self.u_stride
            row_start += self.v_stride


def _check_bounds(grid: VoxelGrid, lo: Sequence[int], hi: Sequence[int]) -> None:
    for axis in range(3):
        if not (0 <= lo[axis] <= hi[axis] < grid.shape[axis]):
            raise ValueError(
                f"提取区域 min={tuple(lo)} max={tuple(hi)} 超出体素形状 {grid.shape}"
            )


def greedy_quads(
    grid: VoxelGrid,
    min_point: Point3,
    max_point: Point3,
    faces: Sequence[OrientedBlockFace] = RIGHT_HANDED_Y_UP_FACES,
) -> QuadBuffer:
    """贪心合并同平面、同合并值的可见面，生成尽量少的矩形面片。

    参数
    ------
    grid: VoxelGrid
        线性化体素数组。
    min_point, max_point: (x, y, z)
        提取区域（闭区间）。区域最外一层只用于判断边界面是否可见，
        真正扫描的是向内收缩一格后的内部区域。
    faces: 朝向面序列
        输出按该顺序分组。

    返回
    ------
    QuadBuffer，groups[i] 为 faces[i] 方向上的面片，组内按扫描顺序排列。
    """

    _check_bounds(grid, min_point, max_point)

    interior_lo = [c + 1 for c in min_point]
    interior_hi = [c for c in max_point]  # 开区间上界：max - 1 + 1

    values: List[int] = grid.data.tolist()
    buffer = QuadBuffer()

    if any(lo >= hi for lo, hi in zip(interior_lo, interior_hi)):
        # 区域太薄，没有内部体素
        buffer.groups = [[] for _ in faces]
        return buffer

    for face in faces:
        visited = bytearray(grid.size)
        scan = _FaceScan(values, grid, face, visited)
        i_n, i_u, i_v = face.permutation
        quads: List[UnorientedQuad] = []

        for slice_coord in range(interior_lo[i_n], interior_hi[i_n]):
            lo = list(interior_lo)
            hi = list(interior_hi)
            lo[i_n] = slice_coord
            hi[i_n] = slice_coord + 1
            u_ub = hi[i_u]
            v_ub = hi[i_v]

            for z in range(lo[2], hi[2]):
                for y in range(lo[1], hi[1]):
                    for x in range(lo[0], hi[0]):
                        quad_min = (x, y, z)
                        start = grid.linearize(quad_min)
                        if not scan.needs_mesh(start):
                            continue
                        width, height = scan.max_quad(
                            start,
                            max_width=u_ub - quad_min[i_u],
                            max_height=v_ub - quad_min[i_v],
                        )
                        scan.mark_visited(start, width, height)
                        quads.append(UnorientedQuad(minimum=quad_min, width=width, height=height))

        buffer.groups.append(quads)

    logger.debug(
        "greedy_quads shape=%s quads=%d per_face=%s",
        grid.shape,
        buffer.num_quads,
        [len(g) for g in buffer.groups],
    )
    return buffer


def naive_face_count(grid: VoxelGrid, min_point: Point3, max_point: Point3) -> int:
    """不做合并时需要的面数：内部每个实心体素的每个暴露面各算一个。"""

    _check_bounds(grid, min_point, max_point)
    solid = grid.as_array() != EMPTY
    (x0, y0, z0), (x1, y1, z1) = min_point, max_point
    window = solid[x0 : x1 + 1, y0 : y1 + 1, z0 : z1 + 1]
    inner = window[1:-1, 1:-1, 1:-1]
    if inner.size == 0:
        return 0

    total = 0
    for axis in range(3):
        for shift in (-1, 1):
            neighbor = np.roll(window, -shift, axis=axis)[1:-1, 1:-1, 1:-1]
            total += int(np.count_nonzero(inner & ~neighbor))
    return total


def mesh_buffers(
    buffer: QuadBuffer,
    faces: Sequence[OrientedBlockFace] = RIGHT_HANDED_Y_UP_FACES,
    voxel_size: float = 1.0,
) -> MeshBuffers:
    """把分组面片展开为顶点、法线与三角形索引。

    每个面片输出 4 个顶点、4 个法线和 6 个索引（两个三角形），
    绕序由面方向决定。
    """

    positions: List[Tuple[float, float, float]] = []
    normals: List[Tuple[float, float, float]] = []
    indices: List[int] = []

    for group, face in zip(buffer.groups, faces):
        for quad in group:
            indices.extend(face.quad_mesh_indices(len(positions)))
            positions.extend(face.quad_mesh_positions(quad, voxel_size))
            normals.extend(face.quad_mesh_normals())

    return MeshBuffers(
        positions=np.asarray(positions, dtype=np.float32).reshape(-1, 3),
        normals=np.asarray(normals, dtype=np.float32).reshape(-1, 3),
        indices=np.asarray(indices, dtype=np.uint32),
    )
