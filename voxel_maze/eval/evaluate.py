from __future__ import annotations

import csv
import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from time import perf_counter
from typing import List, Sequence

from ..algorithms.greedy_quads import greedy_quads, mesh_buffers, naive_face_count
from ..connectivity import is_perfect, passages, reachable_rooms
from ..maps import SCALE_DIMS, generate_map
from ..voxelize import extraction_bounds, voxelize
from .charts import plot_all_charts

logger = logging.getLogger(__name__)


@dataclass
class ExperimentResult:
    """单次实验（维度 × 尺度）的指标记录。"""

    dimension: str
    scale: str
    seed: int
    size: str

    rooms: int
    passages: int
    connected: bool
    perfect: bool

    solid_voxels: int
    colliders: int
    quads: int
    naive_faces: int
    merge_ratio: float  # quads / naive_faces，越小合并越充分
    triangles: int

    generate_ms: float
    voxelize_ms: float
    mesh_ms: float


FIELDNAMES = [f.name for f in fields(ExperimentResult)]


def _ensure_output_dirs(base_dir: str) -> None:
    os.makedirs(base_dir, exist_ok=True)
    os.makedirs(os.path.join(base_dir, "charts"), exist_ok=True)


def run_experiment(dimension: str, scale: str, seed: int) -> ExperimentResult:
    start = perf_counter()
    maze, info = generate_map(dimension, scale, seed)
    generate_ms = (perf_counter() - start) * 1000.0

    start = perf_counter()
    grid, colliders = voxelize(maze)
    voxelize_ms = (perf_counter() - start) * 1000.0

    start = perf_counter()
    lo, hi = extraction_bounds(grid)
    quads = greedy_quads(grid, lo, hi)
    buffers = mesh_buffers(quads)
    mesh_ms = (perf_counter() - start) * 1000.0

    naive = naive_face_count(grid, lo, hi)
    num_quads = quads.num_quads

    return ExperimentResult(
        dimension=info.dimension,
        scale=info.scale,
        seed=info.seed,
        size="x".join(str(n) for n in maze.size),
        rooms=maze.num_rooms,
        passages=len(passages(maze)),
        connected=len(reachable_rooms(maze)) == maze.num_rooms,
        perfect=is_perfect(maze),
        solid_voxels=grid.count_solid(),
        colliders=len(colliders),
        quads=num_quads,
        naive_faces=naive,
        merge_ratio=num_quads / naive if naive > 0 else 1.0,
        triangles=len(buffers.indices) // 3,
        generate_ms=generate_ms,
        voxelize_ms=voxelize_ms,
        mesh_ms=mesh_ms,
    )


def run_all_experiments(
    output_dir: str = "output",
    dimensions: Sequence[str] = ("2d", "3d"),
    scales: Sequence[str] = ("small", "medium", "large"),
    base_seed: int = 42,
) -> List[ExperimentResult]:
    _ensure_output_dirs(output_dir)

    results: List[ExperimentResult] = []

    for dim_idx, dimension in enumerate(dimensions):
        for scale_idx, scale in enumerate(scales):
            # 固定随机种子，保证可复现
            seed = base_seed + dim_idx * 100 + scale_idx
            result = run_experiment(dimension, scale, seed)
            logger.info(
                "experiment dimension=%s scale=%s size=%s quads=%d naive=%d mesh_ms=%.1f",
                dimension,
                scale,
                result.size,
                result.quads,
                result.naive_faces,
                result.mesh_ms,
            )
            results.append(result)

    # 写出 CSV 与 JSON 摘要
    csv_path = os.path.join(output_dir, "results_table.csv")
    json_path = os.path.join(output_dir, "summary.json")

    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for r in results:
            writer.writerow(asdict(r))

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump([asdict(r) for r in results], f, ensure_ascii=False, indent=2)

    # 生成图表
    charts_dir = os.path.join(output_dir, "charts")
    plot_all_charts(results, charts_dir)

    return results


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_all_experiments(dimensions=tuple(SCALE_DIMS))


if __name__ == "__main__":
    main()
