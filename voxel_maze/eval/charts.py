from __future__ import annotations

import os
from typing import Dict, Iterable, List

import matplotlib.pyplot as plt
import numpy as np

SCALE_ORDER = ["small", "medium", "large"]
DIMENSION_LABELS = {"2d": "二维迷宫", "3d": "三维迷宫"}


def _group_by(
    results: Iterable[dict], key: str
) -> Dict[str, List[dict]]:
    grouped: Dict[str, List[dict]] = {}
    for r in results:
        k = r[key]
        grouped.setdefault(k, []).append(r)
    return grouped


def _plot_quads_vs_naive(results: List[dict], output_dir: str) -> None:
    """按维度生成柱状图：横轴为尺度，柱为贪心面片数与逐面面数。"""

    for dimension, rows in _group_by(results, "dimension").items():
        by_scale = {r["scale"]: r for r in rows}
        scales = [s for s in SCALE_ORDER if s in by_scale]
        if not scales:
            continue

        fig, ax = plt.subplots(figsize=(8, 5), dpi=150)

        x = np.arange(len(scales))
        width = 0.35

        series = [("naive_faces", "逐面（不合并）"), ("quads", "贪心合并")]
        for i, (key, label) in enumerate(series):
            vals = [by_scale[s][key] for s in scales]
            offset = (i - (len(series) - 1) / 2) * width
            ax.bar(x + offset, vals, width, label=label)

        ax.set_xticks(x)
        ax.set_xticklabels([f"{s}\n{by_scale[s]['size']}" for s in scales])
        ax.set_ylabel("面片数量")
        ax.set_title(f"面片数量对比（{DIMENSION_LABELS.get(dimension, dimension)}）")

        # 图例放在下方，避免遮挡图形
        ax.legend(loc="lower center", bbox_to_anchor=(0.5, -0.3), ncol=len(series), frameon=False)
        fig.subplots_adjust(bottom=0.3, top=0.88)

        out_path = os.path.join(output_dir, f"quads_{dimension}.png")
        fig.savefig(out_path, bbox_inches="tight")
        plt.close(fig)


def _plot_runtime(results: List[dict], output_dir: str) -> None:
    """各阶段耗时的堆叠柱状图，每个 (维度, 尺度) 一根柱。"""

    if not results:
        return

    fig, ax = plt.subplots(figsize=(8, 5), dpi=150)

    labels = [f"{r['dimension']}-{r['scale']}" for r in results]
    x = np.arange(len(results))
    bottom = np.zeros(len(results))

    stages = [("generate_ms", "生成"), ("voxelize_ms", "体素化"), ("mesh_ms", "网格化")]
    for key, label in stages:
        vals = np.array([r[key] for r in results], dtype=float)
        ax.bar(x, vals, 0.5, bottom=bottom, label=label)
        bottom += vals

    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=30)
    ax.set_ylabel("运行时间 (ms)")
    ax.set_title("各阶段运行时间")

    ax.legend(loc="lower center", bbox_to_anchor=(0.5, -0.35), ncol=len(stages), frameon=False)
    fig.subplots_adjust(bottom=0.3, top=0.88)

    out_path = os.path.join(output_dir, "runtime.png")
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)


def plot_all_charts(results_dataclasses, output_dir: str) -> None:
    """从 ExperimentResult 列表生成所有图表。"""

    os.makedirs(output_dir, exist_ok=True)

    # dataclass -> dict
    results: List[dict] = [
        r if isinstance(r, dict) else r.__dict__ for r in results_dataclasses
    ]

    # 1) 面片数量对比
    _plot_quads_vs_naive(results, output_dir)

    # 2) 运行时间对比
    _plot_runtime(results, output_dir)
