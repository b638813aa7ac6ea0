"""Internal bounding box validation functions."""

# Standard library
from typing import Union, Sequence

# External
import numpy as np

# Type Aliases
BboxType = Sequence[Union[int, float]]
GeoTransformType = Sequence[Union[int, float]]


def _check_is_valid_bbox(bbox_ogr: BboxType) -> bool:
    """Checks if a bbox is a valid OGR formatted bbox.

    A valid OGR formatted bbox has the form: `[x_min, x_max, y_min, y_max]`.

    Validation Rules:
        - Must be a sequence (list or tuple) of 4 numbers.
        - `x_min` must be less than or equal to `x_max`.
        - `y_min` must be less than or equal to `y_max`.
        - None, NaN and infinite values are not allowed.

    Parameters
    ----------
    bbox_ogr : BboxType
        An OGR formatted bounding box: `[x_min, x_max, y_min, y_max]`.

    Returns
    -------
    bool
        True if the bbox is valid, False otherwise.

    Examples
    --------
    >>> _check_is_valid_bbox([0, 1, 0, 1])
    True
    >>> _check_is_valid_bbox([0, 1, 1, 0]) # y_min > y_max
    False
    >>> _check_is_valid_bbox([0, 1, 0, np.inf])
    False
    """
    if not isinstance(bbox_ogr, (list, tuple)):
        return False

    if len(bbox_ogr) != 4:
        return False

    for val in bbox_ogr:
        if isinstance(val, bool) or not isinstance(val, (int, float, np.integer, np.floating)):
            return False
        if not np.isfinite(val):
            return False

    x_min, x_max, y_min, y_max = bbox_ogr

    if x_min > x_max or y_min > y_max:
        return False

    return True


def _check_is_valid_geotransform(geotransform: GeoTransformType) -> bool:
    """Checks if a GDAL geotransform is valid for a north-up grid.

    A valid geotransform is a sequence (list or tuple) of 6 numbers:
    `[origin_x, pixel_width, row_skew, origin_y, column_skew, pixel_height]`

    Validation Rules:
        - Must be a sequence of 6 finite numbers.
        - `pixel_width` (index 1) cannot be zero.
        - `pixel_height` (index 5) cannot be zero.

    Parameters
    ----------
    geotransform : GeoTransformType
        A GDAL formatted geotransform sequence.

    Returns
    -------
    bool
        True if the geotransform is valid, False otherwise.

    Examples
    --------
    >>> _check_is_valid_geotransform([0, 1, 0, 10, 0, -1])
    True
    >>> _check_is_valid_geotransform([0, 0, 0, 10, 0, -1]) # Zero pixel width
    False
    """
    if not isinstance(geotransform, (list, tuple)):
        return False

    if len(geotransform) != 6:
        return False

    for val in geotransform:
        if isinstance(val, bool) or not isinstance(val, (int, float, np.integer, np.floating)):
            return False
        if not np.isfinite(val):
            return False

    if abs(float(geotransform[1])) < 1e-15:
        return False

    if abs(float(geotransform[5])) < 1e-15:
        return False

    return True


def _check_bboxes_intersect(
    bbox1_ogr: BboxType,
    bbox2_ogr: BboxType,
) -> bool:
    """Checks if two OGR formatted bounding boxes intersect.

    Sharing an edge or a corner counts as intersecting.

    Parameters
    ----------
    bbox1_ogr : BboxType
        The first OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.
    bbox2_ogr : BboxType
        The second OGR formatted bbox: `[x_min, x_max, y_min, y_max]`.

    Returns
    -------
    bool
        True if the bounding boxes intersect, False otherwise.

    Raises
    ------
    ValueError
        If either input is not a valid OGR formatted bbox.

    Examples
    --------
    >>> _check_bboxes_intersect([0, 1, 0, 1], [0.5, 1.5, 0.5, 1.5]) # Overlap
    True
    >>> _check_bboxes_intersect([0, 1, 0, 1], [1, 2, 0, 1]) # Touch edge
    True
    >>> _check_bboxes_intersect([0, 1, 0, 1], [2, 3, 2, 3]) # Separate
    False
    """
    if not _check_is_valid_bbox(bbox1_ogr):
        raise ValueError(f"bbox1_ogr is not a valid OGR bbox: {bbox1_ogr}")
    if not _check_is_valid_bbox(bbox2_ogr):
        raise ValueError(f"bbox2_ogr is not a valid OGR bbox: {bbox2_ogr}")

    bbox1_x_min, bbox1_x_max, bbox1_y_min, bbox1_y_max = bbox1_ogr
    bbox2_x_min, bbox2_x_max, bbox2_y_min, bbox2_y_max = bbox2_ogr

    if bbox1_y_max < bbox2_y_min or bbox1_y_min > bbox2_y_max:
        return False

    return not (bbox1_x_max < bbox2_x_min or bbox1_x_min > bbox2_x_max)


def _check_bboxes_within(
    bbox1_ogr: BboxType,
    bbox2_ogr: BboxType,
) -> bool:
    """Checks if the first bounding box (bbox1_ogr) is completely within
    the second bounding box (bbox2_ogr). Shared edges count as within.

    Parameters
    ----------
    bbox1_ogr : BboxType
        The OGR formatted bbox to check if it's contained:
        `[x_min, x_max, y_min, y_max]`.
    bbox2_ogr : BboxType
        The OGR formatted bbox to check against (the container):
        `[x_min, x_max, y_min, y_max]`.

    Returns
    -------
    bool
        True if bbox1_ogr is completely within bbox2_ogr, False otherwise.

    Raises
    ------
    ValueError
        If either input is not a valid OGR formatted bbox.

    Examples
    --------
    >>> _check_bboxes_within([1, 2, 1, 2], [0, 3, 0, 3]) # Fully contained
    True
    >>> _check_bboxes_within([0, 4, 0, 4], [1, 3, 1, 3]) # Container is smaller
    False
    """
    if not _check_is_valid_bbox(bbox1_ogr):
        raise ValueError(f"bbox1_ogr is not a valid OGR bbox: {bbox1_ogr}")
    if not _check_is_valid_bbox(bbox2_ogr):
        raise ValueError(f"bbox2_ogr is not a valid OGR bbox: {bbox2_ogr}")

    bbox1_x_min, bbox1_x_max, bbox1_y_min, bbox1_y_max = bbox1_ogr
    bbox2_x_min, bbox2_x_max, bbox2_y_min, bbox2_y_max = bbox2_ogr

    y_within = bbox1_y_min >= bbox2_y_min and bbox1_y_max <= bbox2_y_max
    x_within = bbox1_x_min >= bbox2_x_min and bbox1_x_max <= bbox2_x_max

    return x_within and y_within
