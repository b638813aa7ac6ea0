"""Internal bounding box operation functions."""

# Standard library
import math
from typing import List, Union, Tuple, Sequence, Optional

# External
import numpy as np

# Internal
from rastergeom.bbox.validation import (_check_is_valid_bbox, _check_is_valid_geotransform,
                                        _check_bboxes_intersect)
from rastergeom.utils.utils_errors import TransformError

# Type Aliases
BboxType = Sequence[Union[int, float]]
GeoTransformType = Sequence[Union[int, float]]

SNAP_TOLERANCE = 1e-9


def _get_bbox_from_geotransform(
    geotransform: GeoTransformType,
    raster_x_size: int,
    raster_y_size: int,
) -> List[float]:
    """Calculates the OGR bounding box from a geotransform and raster dimensions.

    Parameters
    ----------
    geotransform : GeoTransformType
        A GDAL formatted geotransform:
        `[origin_x, pixel_width, row_skew, origin_y, column_skew, pixel_height]`.
    raster_x_size : int
        The number of pixels (columns) in the x direction (width).
    raster_y_size : int
        The number of pixels (rows) in the y direction (height).

    Returns
    -------
    List[float]
        An OGR formatted bounding box: `[x_min, x_max, y_min, y_max]`.

    Raises
    ------
    ValueError
        If `geotransform` is invalid or `raster_x_size`/`raster_y_size` are negative.
    TypeError
        If `raster_x_size` or `raster_y_size` are not integers.

    Examples
    --------
    >>> gt = [0.0, 1.0, 0.0, 10.0, 0.0, -1.0]
    >>> _get_bbox_from_geotransform(gt, 5, 5)
    [0.0, 5.0, 5.0, 10.0]
    """
    if not isinstance(raster_x_size, (int, np.integer)) or not isinstance(raster_y_size, (int, np.integer)):
        raise TypeError("raster_x_size and raster_y_size must be integers.")
    if raster_x_size < 0 or raster_y_size < 0:
        raise ValueError("raster sizes cannot be negative.")
    if not _check_is_valid_geotransform(geotransform):
        raise ValueError(f"Invalid geotransform provided: {geotransform}")

    origin_x = float(geotransform[0])
    pixel_width = float(geotransform[1])
    origin_y = float(geotransform[3])
    pixel_height = float(geotransform[5])

    x_min = origin_x
    y_max = origin_y
    x_max = origin_x + (raster_x_size * pixel_width)
    y_min = origin_y + (raster_y_size * pixel_height)

    # Positive pixel heights (south-up) flip the order
    if x_max < x_min:
        x_min, x_max = x_max, x_min
    if y_max < y_min:
        y_min, y_max = y_max, y_min

    return [x_min, x_max, y_min, y_max]


def _get_geotransform_from_bbox(
    bbox_ogr: BboxType,
    raster_x_size: int,
    raster_y_size: int,
) -> List[float]:
    """Calculates a north-up GDAL GeoTransform from an OGR bounding box and raster dimensions.

    Parameters
    ----------
    bbox_ogr : BboxType
        An OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.
    raster_x_size : int
        The number of pixels (columns) in the x direction (width).
    raster_y_size : int
        The number of pixels (rows) in the y direction (height).

    Returns
    -------
    List[float]
        The geotransform: `[x_min, pixel_width, 0.0, y_max, 0.0, -pixel_height]`.

    Raises
    ------
    ValueError
        If the bbox is invalid, has no area, or the sizes are not positive.

    Examples
    --------
    >>> _get_geotransform_from_bbox([0.0, 10.0, 0.0, 20.0], 10, 10)
    [0.0, 1.0, 0.0, 20.0, 0.0, -2.0]
    """
    if not _check_is_valid_bbox(bbox_ogr):
        raise ValueError(f"Invalid OGR bounding box provided: {bbox_ogr}")
    if raster_x_size <= 0 or raster_y_size <= 0:
        raise ValueError("raster sizes must be positive.")

    x_min, x_max, y_min, y_max = map(float, bbox_ogr)

    if x_max == x_min or y_max == y_min:
        raise ValueError(f"Bounding box has no area: {bbox_ogr}")

    pixel_width = (x_max - x_min) / raster_x_size
    pixel_height = (y_max - y_min) / raster_y_size

    return [x_min, pixel_width, 0.0, y_max, 0.0, -pixel_height]


def _get_intersection_bboxes(
    bbox1_ogr: BboxType,
    bbox2_ogr: BboxType,
) -> List[float]:
    """Calculates the intersection of two OGR formatted bounding boxes.

    Parameters
    ----------
    bbox1_ogr : BboxType
        The first OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.
    bbox2_ogr : BboxType
        The second OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.

    Returns
    -------
    List[float]
        An OGR formatted bbox representing the intersection.

    Raises
    ------
    ValueError
        If either input is not a valid OGR bbox, or if the
        bounding boxes do not intersect.

    Examples
    --------
    >>> _get_intersection_bboxes([0, 2, 0, 2], [1, 3, 1, 3])
    [1.0, 2.0, 1.0, 2.0]
    """
    if not _check_bboxes_intersect(bbox1_ogr, bbox2_ogr):
        raise ValueError("Bounding boxes do not intersect")

    bbox1_x_min, bbox1_x_max, bbox1_y_min, bbox1_y_max = map(float, bbox1_ogr)
    bbox2_x_min, bbox2_x_max, bbox2_y_min, bbox2_y_max = map(float, bbox2_ogr)

    return [
        max(bbox1_x_min, bbox2_x_min),
        min(bbox1_x_max, bbox2_x_max),
        max(bbox1_y_min, bbox2_y_min),
        min(bbox1_y_max, bbox2_y_max),
    ]


def _get_union_bboxes(
    bbox1_ogr: BboxType,
    bbox2_ogr: BboxType,
) -> List[float]:
    """Calculates the union (bounding hull) of two OGR formatted bboxes.

    Parameters
    ----------
    bbox1_ogr : BboxType
        The first OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.
    bbox2_ogr : BboxType
        The second OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.

    Returns
    -------
    List[float]
        An OGR formatted bbox representing the union.

    Raises
    ------
    ValueError
        If either input is not a valid OGR formatted bbox.

    Examples
    --------
    >>> _get_union_bboxes([0, 1, 0, 1], [1, 2, 1, 2])
    [0.0, 2.0, 0.0, 2.0]
    """
    if not _check_is_valid_bbox(bbox1_ogr):
        raise ValueError(f"Invalid OGR bounding box provided: {bbox1_ogr}")
    if not _check_is_valid_bbox(bbox2_ogr):
        raise ValueError(f"Invalid OGR bounding box provided: {bbox2_ogr}")

    bbox1_x_min, bbox1_x_max, bbox1_y_min, bbox1_y_max = map(float, bbox1_ogr)
    bbox2_x_min, bbox2_x_max, bbox2_y_min, bbox2_y_max = map(float, bbox2_ogr)

    return [
        min(bbox1_x_min, bbox2_x_min),
        max(bbox1_x_max, bbox2_x_max),
        min(bbox1_y_min, bbox2_y_min),
        max(bbox1_y_max, bbox2_y_max),
    ]


def _get_resolved_bbox_to_pixel_size(
    bbox_ogr: BboxType,
    pixel_width: float,
    pixel_height: float,
    anchor: Optional[Tuple[float, float]] = None,
) -> List[float]:
    """Snaps a bounding box outwards to whole pixels of the given size.

    The pixel lattice passes through `anchor`, or through `(0, 0)` when no
    anchor is given. The returned bbox always contains the input bbox. Edges
    already within `SNAP_TOLERANCE` of a pixel of the lattice are not grown.

    Parameters
    ----------
    bbox_ogr : BboxType
        The OGR bbox to resolve: `[x_min, x_max, y_min, y_max]`.
    pixel_width : float
        The pixel width (must be positive).
    pixel_height : float
        The pixel height (must be positive).
    anchor : Tuple[float, float], optional
        A point the lattice passes through, usually the origin of a grid. Default: None.

    Returns
    -------
    List[float]
        The resolved OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.

    Raises
    ------
    ValueError
        If the bbox is invalid or the pixel sizes are not positive.

    Examples
    --------
    >>> _get_resolved_bbox_to_pixel_size([1.2, 3.7, 1.2, 3.7], 1.0, 1.0)
    [1.0, 4.0, 1.0, 4.0]
    >>> _get_resolved_bbox_to_pixel_size([1.2, 3.7, 1.2, 3.7], 1.0, 1.0, anchor=(0.5, 0.5))
    [0.5, 4.5, 0.5, 4.5]
    """
    if not _check_is_valid_bbox(bbox_ogr):
        raise ValueError(f"Invalid OGR bounding box provided: {bbox_ogr}")
    if not pixel_width > 0 or not pixel_height > 0:
        raise ValueError(f"Pixel sizes must be positive, got: {pixel_width}, {pixel_height}")

    anchor_x, anchor_y = (0.0, 0.0) if anchor is None else map(float, anchor)
    x_min, x_max, y_min, y_max = map(float, bbox_ogr)

    steps_x_min = math.floor(((x_min - anchor_x) / pixel_width) + SNAP_TOLERANCE)
    steps_x_max = math.ceil(((x_max - anchor_x) / pixel_width) - SNAP_TOLERANCE)
    steps_y_min = math.floor(((y_min - anchor_y) / pixel_height) + SNAP_TOLERANCE)
    steps_y_max = math.ceil(((y_max - anchor_y) / pixel_height) - SNAP_TOLERANCE)

    # A degenerate input still resolves to at least one pixel
    steps_x_max = max(steps_x_max, steps_x_min + 1)
    steps_y_max = max(steps_y_max, steps_y_min + 1)

    return [
        anchor_x + steps_x_min * pixel_width,
        anchor_x + steps_x_max * pixel_width,
        anchor_y + steps_y_min * pixel_height,
        anchor_y + steps_y_max * pixel_height,
    ]


def _get_rotation_cos_sin(angle_degrees: float) -> Tuple[float, float]:
    """Cosine and sine of an angle in degrees, exact for multiples of 90."""
    quarter_turns, remainder = divmod(float(angle_degrees), 90.0)

    if remainder == 0.0:
        return [(1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0)][int(quarter_turns) % 4]

    theta = math.radians(angle_degrees)

    return math.cos(theta), math.sin(theta)


def _get_rotated_bbox(
    bbox_ogr: BboxType,
    angle_degrees: float,
    pivot: Tuple[float, float],
) -> List[float]:
    """Rotates the corners of a bbox counter-clockwise about a pivot and returns their envelope.

    This is the standard mathematical rotation: positive angles turn from +x towards +y.

    Parameters
    ----------
    bbox_ogr : BboxType
        The OGR bbox to rotate: `[x_min, x_max, y_min, y_max]`.
    angle_degrees : float
        The counter-clockwise angle in degrees.
    pivot : Tuple[float, float]
        The point to rotate about.

    Returns
    -------
    List[float]
        The envelope of the rotated corners as an OGR bbox.

    Raises
    ------
    TransformError
        If the rotation cannot be computed or produces non-finite coordinates.

    Examples
    --------
    >>> _get_rotated_bbox([0.0, 2.0, 0.0, 1.0], 90.0, (0.0, 0.0))
    [-1.0, 0.0, 0.0, 2.0]
    """
    if not _check_is_valid_bbox(bbox_ogr):
        raise TransformError(f"Cannot rotate an invalid bbox: {bbox_ogr}")

    try:
        angle_degrees = float(angle_degrees)
        pivot_x, pivot_y = float(pivot[0]), float(pivot[1])
    except (TypeError, ValueError, IndexError) as e:
        raise TransformError(f"Invalid rotation parameters: {e!s}") from e

    if not math.isfinite(angle_degrees):
        raise TransformError(f"Cannot rotate by a non-finite angle: {angle_degrees}")

    cos_t, sin_t = _get_rotation_cos_sin(angle_degrees)

    x_min, x_max, y_min, y_max = map(float, bbox_ogr)

    xs = []
    ys = []
    for x, y in ((x_min, y_min), (x_max, y_min), (x_max, y_max), (x_min, y_max)):
        dx = x - pivot_x
        dy = y - pivot_y
        xs.append(pivot_x + dx * cos_t - dy * sin_t)
        ys.append(pivot_y + dx * sin_t + dy * cos_t)

    result = [min(xs), max(xs), min(ys), max(ys)]

    if not all(math.isfinite(v) for v in result):
        raise TransformError(f"Rotation of {list(bbox_ogr)} by {angle_degrees} degrees is not finite.")

    return result
