"""### Conversions between world coordinates and grid positions. ###

Grid positions are continuous `(col, row)` pairs: pixel `(c, r)` covers
`[c, c + 1) x [r, r + 1)`, and the upper-left corner of the grid is `(0, 0)`.
"""

# Standard library
import math
from typing import Union, Optional, Sequence, Tuple

# External
from osgeo import gdal, ogr

# Internal
from rastergeom.utils import utils_base, utils_projection
from rastergeom.utils.utils_errors import TransformError, InvalidRegionError
from rastergeom.bbox.bbox_class import Extent
from rastergeom.bbox.operations import _get_resolved_bbox_to_pixel_size, SNAP_TOLERANCE
from rastergeom.core_grid.core_grid_class import Grid

# Type Aliases
NumType = Union[int, float]
PointType = Union[Sequence[NumType], ogr.Geometry]


def _get_point_in_grid_crs(
    grid: Grid,
    point: PointType,
) -> Tuple[float, float]:
    """Reads an `(x, y)` pair or an OGR point, reprojecting the latter into the grid CRS if needed."""
    if isinstance(point, ogr.Geometry):
        if ogr.GT_Flatten(point.GetGeometryType()) != ogr.wkbPoint:
            raise TypeError(f"Expected a point geometry, got {point.GetGeometryName()}")

        if point.IsEmpty():
            raise TransformError("Cannot locate an empty point.")

        point_srs = point.GetSpatialReference()

        if point_srs is not None:
            if grid.projection is None:
                raise TransformError("Cannot reproject a point into a grid without a projection.")

            point = utils_projection.reproject_geometry(point, point_srs, grid.projection)

        return float(point.GetX()), float(point.GetY())

    if not isinstance(point, (list, tuple)) or len(point) != 2:
        raise TypeError(f"point must be an (x, y) pair or an ogr point, got {point}")

    if not all(utils_base._check_variable_is_number_type(v) for v in point):
        raise TypeError(f"point coordinates must be numbers, got {point}")

    return float(point[0]), float(point[1])


def world_to_grid(
    grid: Grid,
    point: PointType,
) -> Tuple[float, float]:
    """Converts a world coordinate to a continuous grid position.

    Parameters
    ----------
    grid : Grid
        The grid to locate the point in.
    point : Sequence[NumType] | ogr.Geometry
        An `(x, y)` pair in the grid CRS, or an OGR point. A point carrying a
        spatial reference other than the grid's is reprojected first.

    Returns
    -------
    Tuple[float, float]
        The continuous `(col, row)` position. It may lie outside the grid.

    Raises
    ------
    TransformError
        If the geotransform cannot be inverted, the reprojection fails, or the
        position is not finite.
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(point, [list, tuple, ogr.Geometry], "point")

    x, y = _get_point_in_grid_crs(grid, point)

    inverse = gdal.InvGeoTransform(grid.geotransform)
    if inverse is None:
        raise TransformError(f"The geotransform of {grid.name} is not invertible: {grid.geotransform}")

    col, row = gdal.ApplyGeoTransform(inverse, x, y)

    if not (math.isfinite(col) and math.isfinite(row)):
        raise TransformError(f"The point ({x}, {y}) does not map to a finite grid position.")

    return col, row


def world_to_grid_index(
    grid: Grid,
    point: PointType,
) -> Tuple[int, int]:
    """Converts a world coordinate to the `(col, row)` index of the pixel containing it.

    The index may lie outside the grid.

    Raises
    ------
    TransformError
        As `world_to_grid`.
    """
    col, row = world_to_grid(grid, point)

    return int(math.floor(col + SNAP_TOLERANCE)), int(math.floor(row + SNAP_TOLERANCE))


def grid_to_world(
    grid: Grid,
    col: NumType,
    row: NumType,
) -> Tuple[float, float]:
    """Converts a continuous grid position to a world coordinate.

    Use `col + 0.5, row + 0.5` to get the centre of a pixel.
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(col, [int, float], "col")
    utils_base._type_check(row, [int, float], "row")

    x, y = gdal.ApplyGeoTransform(grid.geotransform, float(col), float(row))

    return x, y


def resolve_extent_to_grid(
    extent: Extent,
    pixel_width: NumType,
    pixel_height: NumType,
    *,
    anchor: Optional[Tuple[NumType, NumType]] = None,
) -> Extent:
    """Snaps an extent outwards to whole pixels of the given cell size.

    The returned extent always contains the input extent.

    Parameters
    ----------
    extent : Extent
        The extent to resolve.
    pixel_width : int | float
        The cell size along x.
    pixel_height : int | float
        The cell size along y.
    anchor : Tuple[int | float, int | float] | None, optional
        A point the pixel lattice passes through, usually the origin of a grid.
        Default: None, the lattice of multiples of the cell size.

    Returns
    -------
    Extent
        The pixel-aligned extent.

    Raises
    ------
    ValueError
        If the cell sizes are not positive.
    """
    utils_base._type_check(extent, [Extent], "extent")
    utils_base._type_check(pixel_width, [int, float], "pixel_width")
    utils_base._type_check(pixel_height, [int, float], "pixel_height")
    utils_base._type_check(anchor, [tuple, list, None], "anchor")

    resolved = _get_resolved_bbox_to_pixel_size(extent.as_ogr(), pixel_width, pixel_height, anchor=anchor)

    return Extent.from_ogr(resolved)


def get_pixel_window(
    grid: Grid,
    extent: Extent,
) -> Tuple[int, int, int, int]:
    """Finds the minimal pixel window of a grid covering an extent.

    The window is clamped to the grid. Extents with no width or height that lie on the
    right or bottom edge of the grid select the last column or row. Extents with an area
    that only touch the grid cover no pixel.

    Parameters
    ----------
    grid : Grid
        The grid to find the window in.
    extent : Extent
        The extent to cover, in the grid CRS.

    Returns
    -------
    Tuple[int, int, int, int]
        `(col_offset, row_offset, cols, rows)`

    Raises
    ------
    InvalidRegionError
        If the extent does not cover any pixel of the grid.
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(extent, [Extent], "extent")

    col_start = math.floor(((extent.x_min - grid.x_min) / grid.pixel_width) + SNAP_TOLERANCE)
    col_end = math.ceil(((extent.x_max - grid.x_min) / grid.pixel_width) - SNAP_TOLERANCE)
    row_start = math.floor(((grid.y_max - extent.y_max) / grid.pixel_height) + SNAP_TOLERANCE)
    row_end = math.ceil(((grid.y_max - extent.y_min) / grid.pixel_height) - SNAP_TOLERANCE)

    # Points and lines on the right or bottom edge belong to the last pixel
    if extent.width == 0 and col_start == grid.width:
        col_start = grid.width - 1
    if extent.height == 0 and row_start == grid.height:
        row_start = grid.height - 1

    # Extents thinner than a pixel still cover the pixel they fall in
    col_end = max(col_end, col_start + 1)
    row_end = max(row_end, row_start + 1)

    col_start, col_end = max(col_start, 0), min(col_end, grid.width)
    row_start, row_end = max(row_start, 0), min(row_end, grid.height)

    if col_end <= col_start or row_end <= row_start:
        raise InvalidRegionError(f"{extent} does not cover any pixel of {grid.name}")

    return col_start, row_start, col_end - col_start, row_end - row_start
