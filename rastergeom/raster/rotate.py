"""### Rotate grids. ###

Rotates the samples of a grid clockwise about a pivot and recomputes the rotated extent.
The canvas grows to the bounding box of the rotated grid; exposed pixels hold nodata.
"""

# Standard library
import math
from typing import Union, Optional, Sequence, Tuple
from warnings import warn

# External
import numpy as np
from numba import jit, prange
from osgeo import ogr

# Internal
from rastergeom.utils import utils_base, utils_translate
from rastergeom.utils.utils_errors import TransformError
from rastergeom.bbox.bbox_class import Extent
from rastergeom.bbox.operations import _get_rotated_bbox, _get_rotation_cos_sin, SNAP_TOLERANCE
from rastergeom.core_grid.core_grid_class import Grid, create_grid
from rastergeom.core_grid.core_grid_geometry import world_to_grid, grid_to_world
from rastergeom.core_grid.core_grid_stats import _is_close

# Type Aliases
NumType = Union[int, float]
PivotType = Union[Sequence[NumType], ogr.Geometry]

# Nodata property given to rotated multi band grids without a nodata value
DEFAULT_MULTIBAND_NODATA_PROPERTY = 2147483647

INTERPOLATION_METHODS = ["nearest", "bilinear"]


@jit(nopython=True, nogil=True, cache=True, parallel=True)
def _rotate_nearest(src, out, cos_t, sin_t, pivot_col, pivot_row, col_offset, row_offset):
    src_height, src_width, bands = src.shape
    out_height, out_width = out.shape[0], out.shape[1]

    for row in prange(out_height):
        for col in range(out_width):
            d_col = (col_offset + col + 0.5) - pivot_col
            d_row = (row_offset + row + 0.5) - pivot_row

            src_col = int(np.floor(pivot_col + d_col * cos_t + d_row * sin_t))
            src_row = int(np.floor(pivot_row - d_col * sin_t + d_row * cos_t))

            if src_col < 0 or src_col >= src_width or src_row < 0 or src_row >= src_height:
                continue

            for band in range(bands):
                out[row, col, band] = src[src_row, src_col, band]

    return out


@jit(nopython=True, nogil=True, cache=True, parallel=True)
def _rotate_bilinear(src, out, cos_t, sin_t, pivot_col, pivot_row, col_offset, row_offset, nodata_value, has_nodata):
    src_height, src_width, bands = src.shape
    out_height, out_width = out.shape[0], out.shape[1]

    for row in prange(out_height):
        for col in range(out_width):
            d_col = (col_offset + col + 0.5) - pivot_col
            d_row = (row_offset + row + 0.5) - pivot_row

            x = pivot_col + d_col * cos_t + d_row * sin_t
            y = pivot_row - d_col * sin_t + d_row * cos_t

            nearest_col = int(np.floor(x))
            nearest_row = int(np.floor(y))

            if nearest_col < 0 or nearest_col >= src_width or nearest_row < 0 or nearest_row >= src_height:
                continue

            # Sample positions are pixel centres
            x -= 0.5
            y -= 0.5

            x0 = int(np.floor(x))
            y0 = int(np.floor(y))
            fx = x - x0
            fy = y - y0

            x1 = min(max(x0 + 1, 0), src_width - 1)
            y1 = min(max(y0 + 1, 0), src_height - 1)
            x0 = min(max(x0, 0), src_width - 1)
            y0 = min(max(y0, 0), src_height - 1)

            for band in range(bands):
                v00 = float(src[y0, x0, band])
                v01 = float(src[y0, x1, band])
                v10 = float(src[y1, x0, band])
                v11 = float(src[y1, x1, band])

                invalid = np.isnan(v00) or np.isnan(v01) or np.isnan(v10) or np.isnan(v11)
                if has_nodata and not invalid:
                    invalid = (
                        _is_close(v00, nodata_value, 1e-9, 1e-12)
                        or _is_close(v01, nodata_value, 1e-9, 1e-12)
                        or _is_close(v10, nodata_value, 1e-9, 1e-12)
                        or _is_close(v11, nodata_value, 1e-9, 1e-12)
                    )

                # Blending with nodata would invent values, so fall back to the nearest sample
                if invalid:
                    out[row, col, band] = float(src[nearest_row, nearest_col, band])
                    continue

                top = v00 * (1.0 - fx) + v01 * fx
                bottom = v10 * (1.0 - fx) + v11 * fx
                out[row, col, band] = top * (1.0 - fy) + bottom * fy

    return out


def _get_rotated_canvas(
    width: int,
    height: int,
    cos_t: float,
    sin_t: float,
    pivot_col: float,
    pivot_row: float,
) -> Tuple[int, int, int, int]:
    """Finds the pixel bounding box of a grid rotated clockwise about a pivot pixel.

    Returns
    -------
    Tuple[int, int, int, int]
        `(col_offset, row_offset, width, height)` of the canvas, relative to the source pixels.
    """
    cols = []
    rows = []
    for col, row in ((0, 0), (width, 0), (width, height), (0, height)):
        d_col = col - pivot_col
        d_row = row - pivot_row
        cols.append(pivot_col + d_col * cos_t - d_row * sin_t)
        rows.append(pivot_row + d_col * sin_t + d_row * cos_t)

    col_min = math.floor(min(cols) + SNAP_TOLERANCE)
    col_max = math.ceil(max(cols) - SNAP_TOLERANCE)
    row_min = math.floor(min(rows) + SNAP_TOLERANCE)
    row_max = math.ceil(max(rows) - SNAP_TOLERANCE)

    return col_min, row_min, max(col_max - col_min, 1), max(row_max - row_min, 1)


def _get_pivot_pixel(
    grid: Grid,
    pivot: Optional[PivotType],
) -> Tuple[float, float]:
    """Resolves the pivot to a pixel position. Unresolvable pivots fall back to the lower-left corner."""
    if pivot is None:
        return 0.0, float(grid.height)

    try:
        return world_to_grid(grid, pivot)
    except TransformError as e:
        warn(f"Could not locate the pivot {pivot} in {grid.name}, rotating about the lower-left corner: {e}", UserWarning)

    return 0.0, float(grid.height)


def grid_rotate(
    grid: Grid,
    angle: NumType,
    pivot: Optional[PivotType] = None,
    *,
    interpolation: str = "nearest",
    strict: bool = False,
    verbose: int = 0,
) -> Grid:
    """Rotates a grid clockwise about a pivot.

    The samples are rotated clockwise by `angle` as seen on a north-up map, onto a canvas
    holding the bounding box of the rotated grid. Exposed pixels are filled with the nodata
    value of the grid, or with the default nodata of its dtype if it has none.

    The extent of the result is the envelope of the original extent rotated about the pivot,
    sized by the pixel dimensions of the canvas. If the extent cannot be rotated, a warning
    is issued, the original extent is kept and the result is flagged `degraded`.

    The canvas is placed on whole pixels of the source lattice, while the extent is anchored
    at the minimum corner of the rotated envelope. For angles that are not multiples of 90
    degrees, or pivots off the pixel lattice, the samples and the extent can therefore be up
    to one pixel apart. Right angles about a pixel corner are exact.

    Parameters
    ----------
    grid : Grid
        The grid to rotate.
    angle : int | float
        The clockwise rotation in degrees.
    pivot : Sequence[int | float] | ogr.Geometry | None, optional
        The world point to rotate about, as an `(x, y)` pair in the grid CRS or an OGR point.
        Default: None, the lower-left corner of the grid.
    interpolation : str, optional
        "nearest" or "bilinear". Default: "nearest".
    strict : bool, optional
        Raise instead of returning a degraded grid. Default: False.
    verbose : int, optional
        Print the canvas when above 0. Default: 0.

    Returns
    -------
    Grid
        The rotated grid. Single band grids keep their min/max. Multi band grids record their
        nodata in the "No Data" and "GC_NODATA" properties.

    Raises
    ------
    ValueError
        If the angle is not finite or the interpolation method is unknown.
    TransformError
        If `strict` is True and the extent cannot be rotated.
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(angle, [int, float], "angle")
    utils_base._type_check(pivot, [list, tuple, ogr.Geometry, None], "pivot")
    utils_base._type_check(interpolation, [str], "interpolation")
    utils_base._type_check(strict, [bool], "strict")
    utils_base._type_check(verbose, [int], "verbose")

    if not math.isfinite(angle):
        raise ValueError(f"angle must be finite, got {angle}")

    if interpolation not in INTERPOLATION_METHODS:
        raise ValueError(f"Invalid interpolation: {interpolation}. Must be one of {INTERPOLATION_METHODS}")

    pivot_col, pivot_row = _get_pivot_pixel(grid, pivot)
    pivot_world = grid_to_world(grid, pivot_col, pivot_row)

    if grid.has_nodata():
        fill_value = grid.nodata_value
    else:
        fill_value = utils_translate._get_default_nodata_value(grid.dtype)

    cos_t, sin_t = _get_rotation_cos_sin(angle)
    col_offset, row_offset, out_width, out_height = _get_rotated_canvas(
        grid.width, grid.height, cos_t, sin_t, pivot_col, pivot_row,
    )

    if verbose > 0:
        print(f"Rotating {grid.name} by {angle} degrees about {pivot_world} onto a {out_width}x{out_height} canvas")

    if interpolation == "nearest":
        out_dtype = utils_translate._get_dtype_holding_value(grid.dtype, fill_value)
        rotated = np.full((out_height, out_width, grid.bands), fill_value, dtype=out_dtype)
        rotated = _rotate_nearest(
            grid.array.astype(out_dtype, copy=False), rotated,
            cos_t, sin_t, pivot_col, pivot_row, float(col_offset), float(row_offset),
        )
    else:
        rotated = np.full((out_height, out_width, grid.bands), fill_value, dtype=np.float64)
        rotated = _rotate_bilinear(
            np.ascontiguousarray(grid.array), rotated,
            cos_t, sin_t, pivot_col, pivot_row, float(col_offset), float(row_offset),
            float(fill_value), grid.has_nodata(),
        )

        out_dtype = utils_translate._get_dtype_holding_value(grid.dtype, fill_value)
        if np.issubdtype(out_dtype, np.integer):
            rotated = np.rint(rotated)
        rotated = rotated.astype(out_dtype)

    degraded = False
    try:
        rotated_bbox = _get_rotated_bbox(grid.bbox, 360.0 - angle, pivot_world)
        x_min, y_min = rotated_bbox[0], rotated_bbox[2]
        extent = Extent(
            x_min,
            y_min,
            x_min + (out_width * grid.pixel_width),
            y_min + (out_height * grid.pixel_height),
        )
    except TransformError as e:
        if strict:
            raise

        warn(f"Could not rotate the extent of {grid.name}, keeping the original extent: {e}", UserWarning)
        extent = grid.extent
        degraded = True

    properties = dict(grid.properties)
    if grid.bands > 1:
        declared_nodata = grid.nodata_value if grid.has_nodata() else DEFAULT_MULTIBAND_NODATA_PROPERTY
        properties["No Data"] = declared_nodata
        properties["GC_NODATA"] = declared_nodata

    return create_grid(
        grid.name,
        rotated,
        extent,
        nodata_value=fill_value,
        min_value=grid.min_value,
        max_value=grid.max_value,
        projection=grid.projection,
        properties=properties,
        degraded=degraded,
    )
