"""### Pad grids. ###

Grows or shrinks the edges of a grid by whole pixels, without resampling the existing samples.
"""

# Standard library
import math
from collections import namedtuple
from typing import Union, Optional
from warnings import warn

# External
import numpy as np

# Internal
from rastergeom.utils import utils_base, utils_translate
from rastergeom.utils.utils_errors import DegenerateGridError, InvalidRegionError
from rastergeom.bbox.bbox_class import Extent
from rastergeom.core_grid.core_grid_class import Grid

# Type Aliases
NumType = Union[int, float]

# Metadata given to padded grids with more than one band
MULTIBAND_NODATA = -1
MULTIBAND_MIN = 0
MULTIBAND_MAX = 255


PadSpec = namedtuple("PadSpec", ["left", "right", "top", "bottom"])
PadSpec.__doc__ = """Signed pixel counts to add (positive) or remove (negative) at each edge of a grid."""


def calculate_pad(
    origin_edge: NumType,
    dest_edge: NumType,
    cell_size: NumType,
    is_max_edge: bool,
) -> int:
    """Calculates the signed number of pixels an edge must move to reach a destination edge.

    Positive results grow the grid, negative results shrink it. Growing a minimum edge
    means decreasing its coordinate, while growing a maximum edge means increasing it,
    so the sign is mirrored between the two edge roles:

    | origin - dest | is_max_edge | result |
    |---------------|-------------|--------|
    | 0             | any         | 0      |
    | < 0           | True        | +n     |
    | < 0           | False       | -n     |
    | > 0           | True        | -n     |
    | > 0           | False       | +n     |

    where `n = floor(|origin - dest| / cell_size + 0.5)`.

    Parameters
    ----------
    origin_edge : int | float
        The coordinate of the edge of the source grid.
    dest_edge : int | float
        The coordinate of the corresponding edge of the desired extent.
    cell_size : int | float
        The cell size along the axis of the edge.
    is_max_edge : bool
        True for the right and top edges, False for the left and bottom edges.

    Returns
    -------
    int
        The signed pixel count.

    Raises
    ------
    DegenerateGridError
        If the cell size is not positive and finite.

    Examples
    --------
    >>> calculate_pad(0.0, -50.0, 10.0, False)
    5
    >>> calculate_pad(100.0, 150.0, 10.0, True)
    5
    """
    utils_base._type_check(origin_edge, [int, float], "origin_edge")
    utils_base._type_check(dest_edge, [int, float], "dest_edge")
    utils_base._type_check(cell_size, [int, float], "cell_size")
    utils_base._type_check(is_max_edge, [bool], "is_max_edge")

    if not math.isfinite(cell_size) or cell_size <= 0:
        raise DegenerateGridError(f"cell_size must be positive and finite, got {cell_size}")

    difference = origin_edge - dest_edge

    if difference == 0:
        return 0

    pixels = int(math.floor((abs(difference) / cell_size) + 0.5))

    if difference < 0:
        return pixels if is_max_edge else -pixels

    return -pixels if is_max_edge else pixels


def get_pad_spec(
    grid_extent: Extent,
    target_extent: Extent,
    pixel_width: NumType,
    pixel_height: NumType,
) -> PadSpec:
    """Calculates the pads that move the edges of `grid_extent` onto `target_extent`.

    Parameters
    ----------
    grid_extent : Extent
        The extent of the grid to pad.
    target_extent : Extent
        The desired extent, ideally aligned to the pixels of the grid.
    pixel_width : int | float
        The cell size along x.
    pixel_height : int | float
        The cell size along y.

    Returns
    -------
    PadSpec
        The signed pads `(left, right, top, bottom)`.
    """
    utils_base._type_check(grid_extent, [Extent], "grid_extent")
    utils_base._type_check(target_extent, [Extent], "target_extent")

    return PadSpec(
        left=calculate_pad(grid_extent.x_min, target_extent.x_min, pixel_width, False),
        right=calculate_pad(grid_extent.x_max, target_extent.x_max, pixel_width, True),
        top=calculate_pad(grid_extent.y_max, target_extent.y_max, pixel_height, True),
        bottom=calculate_pad(grid_extent.y_min, target_extent.y_min, pixel_height, False),
    )


def _get_pad_fill_value(grid: Grid) -> NumType:
    """The fill for new pixels: the grid nodata for single band grids, -1 for multi band grids."""
    if grid.bands > 1:
        return MULTIBAND_NODATA

    if grid.has_nodata():
        return grid.nodata_value

    return utils_translate._get_default_nodata_value(grid.dtype)


def grid_pad(
    grid: Grid,
    pad_spec: PadSpec,
    *,
    fill_value: Optional[NumType] = None,
) -> Grid:
    """Grows or shrinks each edge of a grid by whole pixels.

    New pixels are filled with `fill_value`. When it is not given, single band grids are
    filled with their nodata value (or the default nodata of their dtype if they have none),
    and multi band grids are filled with -1. The fill becomes the nodata value of the result.
    If the fill cannot be stored in the dtype of the grid, the dtype is promoted.

    Parameters
    ----------
    grid : Grid
        The grid to pad.
    pad_spec : PadSpec
        The signed pads `(left, right, top, bottom)`.
    fill_value : int | float | None, optional
        The value of the new pixels. Default: None.

    Returns
    -------
    Grid
        The padded grid. Its origin moves by `left` and `top` pixels.

    Raises
    ------
    InvalidRegionError
        If the pads remove every pixel of the grid.
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(pad_spec, [PadSpec], "pad_spec")
    utils_base._type_check(fill_value, [int, float, np.integer, np.floating, None], "fill_value")

    left, right, top, bottom = (int(v) for v in pad_spec)

    out_width = grid.width + left + right
    out_height = grid.height + top + bottom

    if out_width <= 0 or out_height <= 0:
        raise InvalidRegionError(f"Padding {grid.name} by {pad_spec} removes every pixel.")

    if fill_value is None:
        fill_value = _get_pad_fill_value(grid)

    out_dtype = utils_translate._get_dtype_holding_value(grid.dtype, fill_value)
    if out_dtype != grid.dtype:
        warn(f"Promoting {grid.name} from {grid.dtype.name} to {out_dtype.name} to hold the fill value {fill_value}.", UserWarning)

    padded = np.full((out_height, out_width, grid.bands), fill_value, dtype=out_dtype)

    src_col_start, src_col_end = max(0, -left), grid.width - max(0, -right)
    src_row_start, src_row_end = max(0, -top), grid.height - max(0, -bottom)

    cols = src_col_end - src_col_start
    rows = src_row_end - src_row_start

    if cols > 0 and rows > 0:
        dst_col, dst_row = max(0, left), max(0, top)
        padded[dst_row:dst_row + rows, dst_col:dst_col + cols, :] = grid.array[
            src_row_start:src_row_end, src_col_start:src_col_end, :
        ]

    return grid.replace(
        array=padded,
        x_min=grid.x_min - (left * grid.pixel_width),
        y_max=grid.y_max + (top * grid.pixel_height),
        nodata_value=fill_value,
    )
