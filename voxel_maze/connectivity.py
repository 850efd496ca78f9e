from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from .directions import directions_for
from .maze import MazeGrid

Room = Tuple[int, ...]


class _DisjointSet:
    """并查集，用于检测通道是否构成环。"""

    def __init__(self) -> None:
        self.parent: Dict[Room, Room] = {}

    def find(self, a: Room) -> Room:
        root = self.parent.setdefault(a, a)
        if root != a:
            root = self.find(root)
            self.parent[a] = root
        return root

    def union(self, a: Room, b: Room) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        self.parent[ra] = rb
        return True


def _start_room(maze: MazeGrid, start: Optional[Room]) -> Room:
    if start is None:
        return tuple(0 for _ in maze.size)
    if not maze.contains_room(start):
        raise ValueError(f"起点 {start} 不在迷宫 {maze.size} 范围内")
    return tuple(start)


def passages(maze: MazeGrid) -> List[Tuple[Room, Room]]:
    """所有已挖开的墙，按扫描顺序返回 (room, 正方向邻居) 对。

    每条通道只记录一次：只检查 RIGHT / DOWN / OUT 这些正方向。
    """

    forward = [d for d in directions_for(maze.ndim) if sum(d.offset) > 0]
    result: List[Tuple[Room, Room]] = []
    for room in maze.rooms():
        for direction in forward:
            if maze.passage_open(room, direction):
                neighbor = tuple(i + o for i, o in zip(room, direction.offset))
                result.append((room, neighbor))
    return result


def room_distances(maze: MazeGrid, start: Optional[Room] = None) -> Dict[Room, int]:
    """从 start（缺省为原点房间）出发的 BFS 步数。"""

    origin = _start_room(maze, start)
    dist: Dict[Room, int] = {origin: 0}
    q: deque[Room] = deque([origin])
    while q:
        room = q.popleft()
        for nb in maze.neighbors(room):
            if nb in dist:
                continue
            dist[nb] = dist[room] + 1
            q.append(nb)
    return dist


def reachable_rooms(maze: MazeGrid, start: Optional[Room] = None) -> Set[Room]:
    return set(room_distances(maze, start))


def farthest_room(maze: MazeGrid, start: Optional[Room] = None) -> Tuple[Room, int]:
    """距离 start 最远的可达房间及其步数；并列时取扫描顺序靠前者。"""

    dist = room_distances(maze, start)
    best_room = _start_room(maze, start)
    best = 0
    for room in maze.rooms():
        d = dist.get(room)
        if d is not None and d > best:
            best_room, best = room, d
    return best_room, best


def is_perfect(maze: MazeGrid) -> bool:
    """连通且无环：通道数恰为房间数 - 1，且没有通道连接已连通的两个房间。"""

    edges = passages(maze)
    if len(edges) != maze.num_rooms - 1:
        return False
    dsu = _DisjointSet()
    for a, b in edges:
        if not dsu.union(a, b):
            return False
    return len(reachable_rooms(maze)) == maze.num_rooms
