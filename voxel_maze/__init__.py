"""迷宫生成与体素网格化代码包。

子模块：
- directions: 二维 / 三维移动方向及随机排列
- maze: 迷宫占据网格与生成入口 generate()
- algorithms: hunt-and-kill 生成 / 贪心面片合并
- faces: 体素朝向面（法线、绕序、角点）
- grid: 线性化的带填充体素数组
- voxelize: 迷宫 -> 体素数组 + 盒子碰撞体
- assembly: 网格与复合碰撞体组装、居中变换
- connectivity: 连通性分析与终点放置
- maps: 预设尺寸
- eval: 统一评估与制图
"""

__all__ = [
    "directions",
    "maze",
    "algorithms",
    "faces",
    "grid",
    "voxelize",
    "assembly",
    "connectivity",
    "maps",
    "eval",
]
