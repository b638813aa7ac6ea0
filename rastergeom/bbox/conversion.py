"""Internal bounding box conversion functions."""

# Standard library
from typing import List, Union, Sequence, Optional

# External
import numpy as np
from osgeo import ogr, osr

# Internal
from rastergeom.bbox.validation import _check_is_valid_bbox

# Type Aliases
BboxType = Sequence[Union[int, float]]


def _get_geom_from_bbox(
    bbox_ogr: BboxType,
    projection_osr: Optional[osr.SpatialReference] = None,
) -> ogr.Geometry:
    """Converts an OGR formatted bounding box to an OGR Polygon Geometry.

    Parameters
    ----------
    bbox_ogr : BboxType
        An OGR formatted bounding box: `[x_min, x_max, y_min, y_max]`.
    projection_osr : osr.SpatialReference, optional
        The spatial reference to assign to the geometry. Default: None.

    Returns
    -------
    ogr.Geometry
        An OGR Polygon geometry representing the bounding box.

    Raises
    ------
    ValueError
        If `bbox_ogr` is not a valid OGR bbox or if geometry creation fails.

    Examples
    --------
    >>> geom = _get_geom_from_bbox([0.0, 1.0, 0.0, 1.0])
    >>> geom.GetGeometryName()
    'POLYGON'
    """
    if not _check_is_valid_bbox(bbox_ogr):
        raise ValueError(f"Invalid bbox format: {bbox_ogr}")

    x_min, x_max, y_min, y_max = map(float, bbox_ogr)

    ring = ogr.Geometry(ogr.wkbLinearRing)
    ring.AddPoint_2D(x_min, y_min)
    ring.AddPoint_2D(x_max, y_min)
    ring.AddPoint_2D(x_max, y_max)
    ring.AddPoint_2D(x_min, y_max)
    ring.AddPoint_2D(x_min, y_min)

    geom = ogr.Geometry(ogr.wkbPolygon)
    if geom.AddGeometry(ring) != ogr.OGRERR_NONE:
        raise ValueError("Failed to add ring to polygon geometry.")

    if projection_osr is not None:
        geom.AssignSpatialReference(projection_osr)

    return geom


def _get_bbox_from_geom(geom: ogr.Geometry) -> List[float]:
    """Extracts the OGR bounding box from an OGR Geometry.

    Parameters
    ----------
    geom : ogr.Geometry
        An OGR geometry object.

    Returns
    -------
    List[float]
        An OGR formatted bounding box: `[x_min, x_max, y_min, y_max]`.

    Raises
    ------
    TypeError
        If `geom` is not a valid `ogr.Geometry` object.
    ValueError
        If the geometry is empty or its envelope contains invalid values.
    """
    if not isinstance(geom, ogr.Geometry):
        raise TypeError(f"geom must be an ogr.Geometry, got {type(geom)}")

    if geom.IsEmpty():
        raise ValueError("Cannot get the bounding box of an empty geometry.")

    # OGR envelopes are already ordered [x_min, x_max, y_min, y_max]
    bbox = [float(v) for v in geom.GetEnvelope()]

    if any(np.isnan(v) for v in bbox) or not _check_is_valid_bbox(bbox):
        raise ValueError(f"Invalid bounding box computed from geometry: {bbox}")

    return bbox
