"""### Utility functions to work with GDAL and projections. ###

Parsing of projections and reprojection of points and geometries between
coordinate reference systems. Failures are raised as `TransformError`.
"""

# Standard Library
import math
from typing import Union, List, Sequence

# External
from osgeo import gdal, ogr, osr

# Internal
from rastergeom.utils.utils_errors import TransformError

# Type Aliases
ProjectionType = Union[str, int, gdal.Dataset, osr.SpatialReference]


def parse_projection(
    projection: ProjectionType,
) -> osr.SpatialReference:
    """Parses a projection description into an osr.SpatialReference.

    The returned reference always uses the traditional GIS axis order (x=easting/longitude,
    y=northing/latitude), which is the order grid coordinates are expressed in.

    Parameters
    ----------
    projection : Union[str, int, gdal.Dataset, osr.SpatialReference]
        An EPSG code (`4326` or `"EPSG:4326"`), a WKT or Proj4 string,
        a GDAL dataset or an existing spatial reference.

    Returns
    -------
    osr.SpatialReference
        The projection as an osr.SpatialReference

    Raises
    ------
    ValueError
        If projection is None, invalid type, or cannot be parsed
    """
    if projection is None:
        raise ValueError("Projection cannot be None")

    if isinstance(projection, bool) or not isinstance(projection, (str, int, gdal.Dataset, osr.SpatialReference)):
        raise ValueError(f"Projection must be str, int, gdal.Dataset or osr.SpatialReference, got {type(projection)}")

    target_proj = osr.SpatialReference()
    gdal.PushErrorHandler("CPLQuietErrorHandler")

    try:
        if isinstance(projection, osr.SpatialReference):
            if not projection.ExportToWkt():
                raise ValueError("Spatial reference is empty")
            target_proj = projection.Clone()

        elif isinstance(projection, gdal.Dataset):
            wkt = projection.GetProjection()
            if not wkt:
                raise ValueError("Raster has no projection")
            target_proj.ImportFromWkt(wkt)

        elif isinstance(projection, int):
            if target_proj.ImportFromEPSG(projection) != 0:
                raise ValueError(f"Invalid EPSG code: {projection}")

        else:
            parsed = False
            if projection.upper().startswith("EPSG:"):
                try:
                    parsed = target_proj.ImportFromEPSG(int(projection.split(":")[1])) == 0
                except (ValueError, IndexError, RuntimeError):
                    parsed = False

            if not parsed:
                for import_func in (target_proj.ImportFromWkt, target_proj.ImportFromProj4):
                    try:
                        if import_func(projection) == 0:
                            parsed = True
                            break
                    except RuntimeError:
                        continue

            if not parsed:
                raise ValueError(f"Could not parse projection string: {projection}")

    except RuntimeError as e:
        raise ValueError(f"Failed to parse projection: {str(e)}") from e
    finally:
        gdal.PopErrorHandler()

    target_proj.SetAxisMappingStrategy(osr.OAMS_TRADITIONAL_GIS_ORDER)

    return target_proj


def _check_projections_match(
    source1: ProjectionType,
    source2: ProjectionType,
) -> bool:
    """Tests if two projection sources have the same projection.

    Parameters
    ----------
    source1 : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The first projection to test.
    source2 : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The second projection to test.

    Returns
    -------
    bool
        True if the projections match, False otherwise.

    Raises
    ------
    ValueError
        If either source is None or cannot be parsed
    """
    if source1 is None or source2 is None:
        raise ValueError("Source projections cannot be None")

    proj1 = parse_projection(source1)
    proj2 = parse_projection(source2)

    return bool(proj1.IsSame(proj2) or proj1.ExportToProj4() == proj2.ExportToProj4())


def _get_transformer(
    proj_source: ProjectionType,
    proj_target: ProjectionType,
) -> osr.CoordinateTransformation:
    """Get a transformer object for reprojecting coordinates.

    Parameters
    ----------
    proj_source : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The source projection.
    proj_target : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The target projection.

    Returns
    -------
    osr.CoordinateTransformation
        The transformer object.

    Raises
    ------
    TransformError
        If the projections cannot be parsed or no transformation exists between them.
    """
    try:
        source_sref = parse_projection(proj_source)
        target_sref = parse_projection(proj_target)
    except ValueError as e:
        raise TransformError(f"Failed to create transformer: {str(e)}") from e

    gdal.PushErrorHandler("CPLQuietErrorHandler")
    try:
        transformer = osr.CoordinateTransformation(source_sref, target_sref)
    except (RuntimeError, TypeError) as e:
        raise TransformError(f"Failed to create transformer: {str(e)}") from e
    finally:
        gdal.PopErrorHandler()

    if transformer is None:
        raise TransformError("Failed to create coordinate transformation")

    return transformer


def reproject_point(
    point: Sequence[Union[int, float]],
    source_projection: ProjectionType,
    target_projection: ProjectionType,
) -> List[float]:
    """Reprojects a point from source to target projection.

    Parameters
    ----------
    point : Sequence[Union[int, float]]
        The point to reproject as [x, y].
    source_projection : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The source projection.
    target_projection : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The target projection.

    Returns
    -------
    List[float]
        The reprojected point as [x, y].

    Raises
    ------
    ValueError
        If the point is not a pair of numbers.
    TransformError
        If reprojection fails.
    """
    if not isinstance(point, (list, tuple)) or len(point) != 2:
        raise ValueError("Point must be a list or tuple of two coordinates")

    if not all(isinstance(x, (int, float)) for x in point):
        raise ValueError("Point coordinates must be numbers")

    try:
        if _check_projections_match(source_projection, target_projection):
            return [float(point[0]), float(point[1])]
    except ValueError as e:
        raise TransformError(f"Invalid projection: {str(e)}") from e

    transformer = _get_transformer(source_projection, target_projection)

    gdal.PushErrorHandler("CPLQuietErrorHandler")
    try:
        x, y, _ = transformer.TransformPoint(float(point[0]), float(point[1]))
    except RuntimeError as e:
        raise TransformError(f"Reprojection failed: {str(e)}") from e
    finally:
        gdal.PopErrorHandler()

    if not (math.isfinite(x) and math.isfinite(y)):
        raise TransformError(f"Reprojection of {point} produced a non-finite coordinate.")

    return [x, y]


def reproject_geometry(
    geom: ogr.Geometry,
    source_projection: ProjectionType,
    target_projection: ProjectionType,
) -> ogr.Geometry:
    """Reprojects a copy of an OGR geometry. The input geometry is not modified.

    Parameters
    ----------
    geom : ogr.Geometry
        The geometry to reproject.
    source_projection : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The projection the geometry is expressed in.
    target_projection : Union[str, int, gdal.Dataset, osr.SpatialReference]
        The projection to express the geometry in.

    Returns
    -------
    ogr.Geometry
        The reprojected geometry, with `target_projection` assigned.

    Raises
    ------
    TypeError
        If geom is not an ogr.Geometry.
    TransformError
        If reprojection fails.
    """
    if not isinstance(geom, ogr.Geometry):
        raise TypeError(f"geom must be an ogr.Geometry, got {type(geom)}")

    try:
        target_sref = parse_projection(target_projection)
        projections_match = _check_projections_match(source_projection, target_sref)
    except ValueError as e:
        raise TransformError(f"Invalid projection: {str(e)}") from e

    reprojected = geom.Clone()

    if projections_match:
        reprojected.AssignSpatialReference(target_sref)
        return reprojected

    transformer = _get_transformer(source_projection, target_sref)

    gdal.PushErrorHandler("CPLQuietErrorHandler")
    try:
        result = reprojected.Transform(transformer)
    except RuntimeError as e:
        raise TransformError(f"Reprojection failed: {str(e)}") from e
    finally:
        gdal.PopErrorHandler()

    if result != ogr.OGRERR_NONE:
        raise TransformError(f"Reprojection failed with OGR error code {result}")

    envelope = reprojected.GetEnvelope()
    if not all(math.isfinite(v) for v in envelope):
        raise TransformError("Reprojection produced non-finite coordinates.")

    reprojected.AssignSpatialReference(target_sref)

    return reprojected
