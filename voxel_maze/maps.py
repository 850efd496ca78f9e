from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .maze import MazeGrid, generate


# 各维度、各尺度的逻辑尺寸；medium 与游戏中默认的 10×10 / 10×10×10 一致
SCALE_DIMS: Dict[str, Dict[str, Tuple[int, ...]]] = {
    "2d": {
        "small": (5, 5),
        "medium": (10, 10),
        "large": (25, 25),
    },
    "3d": {
        "small": (3, 3, 3),
        "medium": (10, 10, 10),
        "large": (14, 14, 14),
    },
}


@dataclass
class MapInfo:
    """地图元信息。"""

    dimension: str  # "2d" / "3d"
    scale: str      # "small" / "medium" / "large"
    seed: int


def map_dims(dimension: str, scale: str) -> Tuple[int, ...]:
    if dimension not in SCALE_DIMS:
        raise ValueError(f"未知 dimension: {dimension}")
    dims = SCALE_DIMS[dimension]
    if scale not in dims:
        raise ValueError(f"未知 scale: {scale}")
    return dims[scale]


def generate_map(dimension: str, scale: str, seed: int) -> Tuple[MazeGrid, MapInfo]:
    """统一入口，根据 dimension 和 scale 生成对应迷宫。"""

    dims = map_dims(dimension, scale)
    maze = generate(*dims, seed=seed)
    return maze, MapInfo(dimension=dimension, scale=scale, seed=seed)
