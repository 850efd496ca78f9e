import numpy as np
import pytest

from voxel_maze.assembly import (
    MAZE_SCALE,
    AssemblyParams,
    CompoundCollider,
    Transform,
    build_maze_assets,
    build_mesh,
    centering_transform,
    room_world_center,
)
from voxel_maze.grid import FULL, VoxelGrid
from voxel_maze.maze import generate
from voxel_maze.voxelize import BoxCollider


def test_mesh_channels_are_consistent():
    maze = generate(5, 5, seed=31)
    assets = build_maze_assets(maze)
    mesh = assets.mesh
    assert mesh.positions.dtype == np.float32
    assert mesh.normals.dtype == np.float32
    assert mesh.uvs.dtype == np.float32
    assert mesh.indices.dtype == np.uint32
    assert mesh.positions.shape == mesh.normals.shape == (mesh.num_vertices, 3)
    assert mesh.uvs.shape == (mesh.num_vertices, 2)
    assert not mesh.uvs.any()
    assert mesh.num_vertices == 4 * mesh.num_quads
    assert mesh.num_triangles == 2 * mesh.num_quads
    assert mesh.triangles().shape == (mesh.num_triangles, 3)


def test_compound_collider_has_one_box_per_solid_cell():
    maze = generate(4, 3, 2, seed=32)
    assets = build_maze_assets(maze)
    assert assets.collider.num_shapes == int(np.count_nonzero(maze.cells))
    assert assets.collider.centers().shape == (assets.collider.num_shapes, 3)
    assert assets.maze is maze


def test_rebuilding_is_idempotent():
    maze = generate(6, 4, seed=33)
    a = build_maze_assets(maze)
    b = build_maze_assets(maze)
    assert np.array_equal(a.mesh.positions, b.mesh.positions)
    assert np.array_equal(a.mesh.normals, b.mesh.normals)
    assert np.array_equal(a.mesh.indices, b.mesh.indices)
    assert a.collider.shapes == b.collider.shapes
    assert a.transform == b.transform


def test_centering_transform_2d_and_3d():
    t2 = centering_transform(generate(3, 3, seed=0))
    assert t2.scale == MAZE_SCALE
    assert t2.translation == (-MAZE_SCALE * 2.5, -MAZE_SCALE, -MAZE_SCALE * 2.5)

    t3 = centering_transform(generate(2, 2, 2, seed=0))
    assert t3.translation == (-MAZE_SCALE * 2.5, -2.0 * MAZE_SCALE, -MAZE_SCALE * 2.5)

    custom = centering_transform(generate(2, 2, seed=0), AssemblyParams(scale=2.0, half_extent=4.0))
    assert custom.translation == (-8.0, -2.0, -8.0)
    assert custom.scale == 2.0


def test_transform_apply():
    t = Transform(translation=(1.0, -2.0, 3.0), scale=2.0)
    out = t.apply(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]))
    assert np.allclose(out, [[1.0, -2.0, 3.0], [3.0, 0.0, 5.0]])


def test_world_boxes_are_scaled():
    collider = CompoundCollider(shapes=[BoxCollider(center=(1.5, 1.5, 1.5))])
    boxes = collider.world_boxes(Transform(translation=(-1.0, 0.0, 0.0), scale=4.0))
    assert boxes == [((5.0, 6.0, 6.0), (2.0, 2.0, 2.0))]


def test_goal_position_matches_reference_layout():
    # 10x10 maze, far corner room, scale 5: the goal sits at (90, 2.5, 90)
    assets = build_maze_assets(generate(10, 10, seed=1))
    assert room_world_center(assets, (9, 9)) == pytest.approx((90.0, 2.5, 90.0))

    assets3 = build_maze_assets(generate(10, 10, 10, seed=1))
    assert room_world_center(assets3, (9, 9, 9)) == pytest.approx((90.0, 92.5, 90.0))


def test_room_world_center_rejects_unknown_room():
    assets = build_maze_assets(generate(2, 2, seed=0))
    with pytest.raises(ValueError):
        room_world_center(assets, (2, 0))


def test_build_mesh_on_empty_grid():
    mesh = build_mesh(VoxelGrid.empty((4, 4, 4)))
    assert mesh.num_quads == 0
    assert mesh.uvs.shape == (0, 2)


def test_world_positions_stay_inside_collider_bounds():
    maze = generate(4, 4, seed=34)
    assets = build_maze_assets(maze)
    world = assets.mesh.world_positions(assets.transform)
    boxes = assets.collider.world_boxes(assets.transform)
    centers = np.array([c for c, _ in boxes])
    half = boxes[0][1][0]
    assert world.min(axis=0) == pytest.approx(centers.min(axis=0) - half)
    assert world.max(axis=0) == pytest.approx(centers.max(axis=0) + half)


def test_single_cube_mesh():
    grid = VoxelGrid.empty((3, 3, 3))
    grid.set((1, 1, 1), FULL)
    mesh = build_mesh(grid)
    assert mesh.num_quads == 6
    assert mesh.num_triangles == 12
    assert mesh.positions.min() == 1.0 and mesh.positions.max() == 2.0
