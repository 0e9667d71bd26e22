# voxelfield

Sparse voxel maps for signed distance fields. Space is split into cubic
blocks of voxels, and a layer allocates blocks only where they are needed.
On top of that the package builds a Euclidean signed distance field (ESDF)
from an occupancy layer. It also marks spheres of space as free or occupied
by hand, compares and re-centres layers, maps values and identifiers to
colours, and writes vertex lists as ASCII PLY files.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `voxelfield.block`: the voxel types `TsdfVoxel`, `EsdfVoxel`,
  `OccupancyVoxel` and `IntensityVoxel`, the `UpdateStatus` flags, and
  `Block`, an n × n × n cube of voxels placed at an origin. It also has the
  grid index helpers `grid_index_from_point`, `center_point_from_grid_index`,
  `origin_point_from_grid_index`, `block_index_from_global_voxel_index` and
  `local_from_global_voxel_index`.
- `voxelfield.layer`: `Layer`, a dictionary of blocks keyed by block index.
  It can allocate, insert and remove blocks, drop distant blocks, list the
  allocated or updated blocks, and look up a voxel by global index or by
  coordinates. `copy()` makes a deep copy.
- `voxelfield.tsdf_map`: `TsdfMap` and `TsdfMapConfig`, a holder for a TSDF
  layer. Build one with `TsdfMap.from_config()`, or with
  `TsdfMap.from_layer_copy(layer)` to hold a copy of a layer.
- `voxelfield.esdf_occ_integrator`: `EsdfOccIntegrator` and
  `EsdfOccIntegratorConfig`. Occupied voxels (positive `probability_log`)
  become fixed at distance zero. Distances then spread to observed free
  voxels through 26-connected steps, up to `max_distance_m`. Only batch
  updates are supported: `update_from_occ_layer_batch()` or
  `update_from_occ_blocks(indices)`.
- `voxelfield.bucket_queue`: `BucketQueue`, a rough priority queue that sorts
  keys into FIFO buckets by value.
- `voxelfield.planning_utils`: `sphere_around_point`,
  `allocate_sphere_around_point`, `fill_sphere_around_point`,
  `clear_sphere_around_point` and `map_bounds_from_layer`. The fill and clear
  functions work on layers whose voxels have `distance`, `observed`,
  `hallucinated` and `fixed`, such as `EsdfVoxel`.
- `voxelfield.layer_utils`: `is_same_voxel`, `is_same_block`,
  `is_same_layer` and `center_blocks_of_layer`.
- `voxelfield.meshing_utils`: `get_sdf_if_valid` and `get_color_if_valid`
  return `None` for voxels that hold no valid data.
- `voxelfield.quaternion`: `RotationQuaternion`, a unit quaternion. It has
  `exp`/`log`, conversion to and from rotation matrices (including
  `from_approximate_rotation_matrix`), `random`, `rotate`, `inverse_rotate`,
  `unique` and multiplication. The module also has `is_valid_rotation_matrix`.
- `voxelfield.color`: `Color` and `Color.blend`, plus `rainbow_color_map`,
  `gray_color_map` and `random_color`.
- `voxelfield.color_maps`: the value-to-colour maps `GrayscaleColorMap`,
  `InverseGrayscaleColorMap`, `RainbowColorMap`, `InverseRainbowColorMap` and
  `IronbowColorMap`, and the identifier-to-colour maps `IrrationalIdColorMap`
  and `ExponentialOffsetIdColorMap`.
- `voxelfield.ply_writer`: `PlyWriter`, a context manager that writes a
  declared number of vertices, with or without colour, as ASCII PLY.

## Example: an ESDF from an occupancy layer

```python
from voxelfield.block import EsdfVoxel, OccupancyVoxel
from voxelfield.layer import Layer
from voxelfield.esdf_occ_integrator import EsdfOccIntegrator, EsdfOccIntegratorConfig

occupancy = Layer(OccupancyVoxel, 0.1, 8)
block = occupancy.allocate_block_by_index((0, 0, 0))
for voxel in block.voxels:
    voxel.observed = True
block.voxel_by_voxel_index((4, 4, 4)).probability_log = 1.0

esdf = Layer(EsdfVoxel, 0.1, 8)
EsdfOccIntegrator(EsdfOccIntegratorConfig(), occupancy, esdf).update_from_occ_layer_batch()

# Two voxels from the occupied one: about 0.2
print(esdf.block_by_index((0, 0, 0)).voxel_by_voxel_index((4, 4, 6)).distance)
```

## Example: a hand-made sphere written to PLY

```python
from voxelfield.block import EsdfVoxel
from voxelfield.layer import Layer
from voxelfield.planning_utils import fill_sphere_around_point
from voxelfield.color_maps import RainbowColorMap
from voxelfield.ply_writer import PlyWriter

layer = Layer(EsdfVoxel, 0.1, 8)
fill_sphere_around_point((0.0, 0.0, 0.0), 0.3, 1.0, layer)

points = [
    (block.coordinates_from_linear_index(i), voxel.distance)
    for block in layer.blocks.values()
    for i, voxel in enumerate(block.voxels)
    if voxel.observed
]
color_map = RainbowColorMap(-0.3, 0.0)
with PlyWriter("sphere.ply") as writer:
    writer.add_vertices_with_properties(len(points), True)
    for coord, distance in points:
        writer.write_vertex(coord, color_map.color_lookup(distance))
```

## What the package does not do

- It does not integrate point clouds or depth measurements into a TSDF
  layer. It holds TSDF layers (`TsdfMap`, `TsdfVoxel`) but does not fill
  them, and it has no ray casting.
- It has no pose or rigid-transform type. Rotations are available through
  `RotationQuaternion`, but translations and whole poses are not.
- It does not extract meshes from a distance field.
- It does not save or load layers. The only file output is PLY vertex lists
  written with `PlyWriter`.
- It has no command-line program. It is a library.