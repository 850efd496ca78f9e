import numpy as np
import pytest

from voxel_maze.grid import EMPTY, FULL, VoxelGrid
from voxel_maze.maze import generate
from voxel_maze.voxelize import (
    UNIT_HALF_EXTENTS,
    cell_to_voxel,
    extraction_bounds,
    voxel_shape,
    voxel_to_cell,
    voxelize,
)


@pytest.mark.parametrize("size", [(1, 1), (4, 7), (1, 1, 1), (3, 2, 4)])
def test_collider_count_matches_solid_cells(size):
    maze = generate(*size, seed=3)
    grid, colliders = voxelize(maze)
    solid = int(np.count_nonzero(maze.cells))
    assert len(colliders) == solid
    assert grid.count_solid() == solid


@pytest.mark.parametrize("size", [(5, 3), (2, 3, 2)])
def test_each_collider_maps_back_to_one_solid_cell(size):
    maze = generate(*size, seed=4)
    grid, colliders = voxelize(maze)
    seen = set()
    for collider in colliders:
        assert collider.half_extents == UNIT_HALF_EXTENTS
        voxel = tuple(int(c - 0.5) for c in collider.center)
        assert all(c - 0.5 == int(c - 0.5) for c in collider.center)
        assert grid.is_solid(voxel)
        cell = voxel_to_cell(maze, voxel)
        assert maze.is_solid(cell), f"collider {collider.center} over walkable cell {cell}"
        seen.add(cell)
    assert len(seen) == len(colliders)


def test_2d_layout_uses_middle_plane():
    maze = generate(3, 2, seed=0)
    grid, _ = voxelize(maze)
    assert voxel_shape(maze) == (9, 3, 7)
    assert grid.shape == (9, 3, 7)
    vox = grid.as_array()
    # only the y == 1 plane holds voxels
    assert not vox[:, 0, :].any()
    assert not vox[:, 2, :].any()
    # maze y maps to voxel z
    assert np.array_equal(vox[1:-1, 1, 1:-1] != EMPTY, maze.cells.T)
    assert cell_to_voxel(maze, (4, 2)) == (5, 1, 3)


def test_3d_layout_offsets_by_one():
    maze = generate(2, 3, 4, seed=0)
    grid, _ = voxelize(maze)
    assert grid.shape == (7, 9, 11)
    vox = grid.as_array()
    assert np.array_equal(vox[1:-1, 1:-1, 1:-1] != EMPTY, maze.cells.transpose(2, 1, 0))
    # padding shell stays empty
    assert not vox[0].any() and not vox[-1].any()
    assert not vox[:, 0].any() and not vox[:, -1].any()
    assert not vox[:, :, 0].any() and not vox[:, :, -1].any()
    assert cell_to_voxel(maze, (1, 2, 3)) == (2, 3, 4)


def test_colliders_follow_cell_row_major_order():
    maze = generate(2, 2, seed=9)
    _, colliders = voxelize(maze)
    cells = [voxel_to_cell(maze, tuple(int(c - 0.5) for c in col.center)) for col in colliders]
    keys = [(y, x) for x, y in cells]
    assert keys == sorted(keys)


def test_walkable_cells_produce_nothing():
    maze = generate(3, 3, seed=1)
    grid, colliders = voxelize(maze)
    for idx in np.argwhere(~maze.cells):
        point = tuple(int(c) for c in idx[::-1])
        assert grid.is_empty(cell_to_voxel(maze, point))


def test_extraction_bounds_cover_whole_grid():
    grid = VoxelGrid.empty((5, 3, 7))
    assert extraction_bounds(grid) == ((0, 0, 0), (4, 2, 6))


def test_voxel_grid_linearization_roundtrip():
    grid = VoxelGrid.empty((4, 3, 5))
    assert grid.linearize((1, 2, 3)) == 1 + 4 * (2 + 3 * 3)
    assert grid.delinearize(grid.linearize((3, 1, 4))) == (3, 1, 4)
    grid.set((3, 1, 4), FULL)
    assert grid.as_array()[3, 1, 4] == FULL
    assert grid.count_solid(((3, 1, 4), (3, 1, 4))) == 1
    assert grid.count_solid(((0, 0, 0), (2, 2, 2))) == 0
    clone = grid.clone()
    clone.set((3, 1, 4), EMPTY)
    assert grid.is_solid((3, 1, 4))


def test_voxel_grid_validates_shape():
    with pytest.raises(ValueError):
        VoxelGrid(data=np.zeros(10, dtype=np.uint8), shape=(2, 2, 2))
    with pytest.raises(ValueError):
        VoxelGrid.empty((0, 2, 2))
