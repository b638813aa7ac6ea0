"""### Crop grids. ###

Extracts the part of a grid covered by an extent or a geometry. Regions reaching past
the grid are clamped to it; growing a grid to a larger region is done by `grid_clip`.
"""

# Standard library
from typing import Union, Sequence, Tuple
from uuid import uuid4
from warnings import warn

# External
import numpy as np
from osgeo import gdal, ogr

# Internal
from rastergeom.utils import utils_base, utils_projection, utils_translate
from rastergeom.utils.utils_errors import InvalidRegionError, TransformError
from rastergeom.bbox.bbox_class import Extent
from rastergeom.bbox.conversion import _get_bbox_from_geom
from rastergeom.core_grid.core_grid_class import Grid
from rastergeom.core_grid.core_grid_geometry import get_pixel_window, grid_to_world
from rastergeom.core_grid.core_grid_stats import get_min_max

# Type Aliases
RegionType = Union[Extent, Sequence[Union[int, float]], ogr.Geometry]


def _get_geometry_in_grid_crs(
    grid: Grid,
    geom: ogr.Geometry,
    strict: bool = False,
) -> Tuple[ogr.Geometry, bool]:
    """Returns the geometry expressed in the CRS of the grid, and whether that failed.

    If the reprojection fails, a warning is issued and a copy of the geometry without
    a spatial reference is returned, so its coordinates are read as grid coordinates.
    With `strict`, the `TransformError` is raised instead.
    """
    geom_srs = geom.GetSpatialReference()

    if geom_srs is None or grid.projection is None:
        return geom, False

    try:
        return utils_projection.reproject_geometry(geom, geom_srs, grid.projection), False
    except TransformError as e:
        if strict:
            raise

        warn(f"Could not reproject the geometry into the CRS of {grid.name}, using its coordinates as given: {e}", UserWarning)

    unprojected = geom.Clone()
    unprojected.AssignSpatialReference(None)

    return unprojected, True


def _check_is_areal_geometry(geom: ogr.Geometry) -> bool:
    """True if the geometry has an area, i.e. it is a (multi)polygon or a surface."""
    return geom.GetDimension() == 2


def _get_geometry_mask(
    geom: ogr.Geometry,
    geotransform: Sequence[float],
    width: int,
    height: int,
    grid: Grid,
    all_touch: bool = False,
) -> np.ndarray:
    """Rasterizes a geometry onto a window, returning True for pixels inside it.

    Parameters
    ----------
    geom : ogr.Geometry
        The geometry to burn, in the CRS of the grid.
    geotransform : Sequence[float]
        The geotransform of the window.
    width : int
        The width of the window in pixels.
    height : int
        The height of the window in pixels.
    grid : Grid
        The grid the window belongs to. Used for the projection.
    all_touch : bool, optional
        Burn every pixel touched by the geometry, not only those whose centre is inside. Default: False.

    Returns
    -------
    np.ndarray
        A boolean mask of shape `(height, width)`.
    """
    driver = ogr.GetDriverByName("GPKG")
    if driver is None:
        raise RuntimeError("GPKG Driver not available.")

    mask_vector_path = f"/vsimem/grid_crop_mask_{uuid4().int}.gpkg"
    mask_vector_ds = driver.CreateDataSource(mask_vector_path)
    if mask_vector_ds is None:
        raise RuntimeError(f"Could not create memory datasource: {mask_vector_path}")

    mask_layer = None
    try:
        mask_layer = mask_vector_ds.CreateLayer(
            "crop_mask",
            srs=grid.projection,
            geom_type=geom.GetGeometryType(),
        )
        if mask_layer is None:
            raise RuntimeError("Could not create memory layer.")

        feature = ogr.Feature(mask_layer.GetLayerDefn())
        feature.SetGeometry(geom)
        mask_layer.CreateFeature(feature)
        feature = None

        mask_raster_ds = gdal.GetDriverByName("MEM").Create("crop_mask", width, height, 1, gdal.GDT_Byte)
        mask_raster_ds.SetGeoTransform(list(geotransform))
        if grid.projection is not None:
            mask_raster_ds.SetProjection(grid.projection.ExportToWkt())

        options = ["ALL_TOUCHED=TRUE"] if all_touch else []

        gdal.RasterizeLayer(
            mask_raster_ds,
            [1],
            mask_layer,
            burn_values=[1],
            options=options,
        )

        mask = mask_raster_ds.GetRasterBand(1).ReadAsArray() == 1
        mask_raster_ds = None

    finally:
        mask_layer = None
        mask_vector_ds = None
        driver.DeleteDataSource(mask_vector_path)

    return mask


def grid_crop(
    grid: Grid,
    region: RegionType,
    *,
    all_touch: bool = False,
    strict: bool = False,
) -> Grid:
    """Crops a grid to the minimal pixel window covering a region.

    For polygon regions, pixels inside the window but outside the polygon are set to the
    nodata value of the grid. If the grid has no nodata value, the default nodata value of
    its dtype is assigned. Points and lines crop to the window of their envelope.

    Parameters
    ----------
    grid : Grid
        The grid to crop.
    region : Extent | Sequence[int | float] | ogr.Geometry
        The region to crop to. Sequences are read as OGR bboxes `[x_min, x_max, y_min, y_max]`.
        Geometries with a spatial reference are reprojected to the grid CRS.
    all_touch : bool, optional
        For polygons, keep every pixel touched by the polygon. Default: False.
    strict : bool, optional
        Raise if the geometry cannot be reprojected, instead of using its coordinates
        as given and flagging the result `degraded`. Default: False.

    Returns
    -------
    Grid
        The cropped grid. Single band grids have their min/max rescanned.

    Raises
    ------
    InvalidRegionError
        If the region does not intersect the grid.
    TransformError
        If `strict` is True and the geometry cannot be reprojected to the grid CRS.
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(region, [Extent, list, tuple, ogr.Geometry], "region")
    utils_base._type_check(all_touch, [bool], "all_touch")
    utils_base._type_check(strict, [bool], "strict")

    geom = None
    degraded = grid.degraded
    if isinstance(region, ogr.Geometry):
        if region.IsEmpty():
            raise InvalidRegionError("Cannot crop to an empty geometry.")

        geom, failed = _get_geometry_in_grid_crs(grid, region, strict=strict)
        degraded = degraded or failed
        region_extent = Extent.from_ogr(_get_bbox_from_geom(geom))

    elif isinstance(region, Extent):
        region_extent = region

    else:
        region_extent = Extent.from_ogr(region)

    if not grid.extent.intersects(region_extent):
        raise InvalidRegionError(f"{region_extent} does not intersect {grid.name} at {grid.extent}")

    col_offset, row_offset, cols, rows = get_pixel_window(grid, region_extent)

    cropped = grid.array[row_offset:row_offset + rows, col_offset:col_offset + cols, :]
    x_min, y_max = grid_to_world(grid, col_offset, row_offset)
    nodata_value = grid.nodata_value

    if geom is not None and _check_is_areal_geometry(geom):
        window_geotransform = [x_min, grid.pixel_width, 0.0, y_max, 0.0, -grid.pixel_height]
        mask = _get_geometry_mask(geom, window_geotransform, cols, rows, grid, all_touch=all_touch)

        if not mask.all():
            if nodata_value is None:
                nodata_value = utils_translate._get_default_nodata_value(grid.dtype)

            out_dtype = utils_translate._get_dtype_holding_value(grid.dtype, nodata_value)
            cropped = cropped.astype(out_dtype, copy=True)
            cropped[~mask] = nodata_value

    min_value, max_value = grid.min_value, grid.max_value
    if grid.bands == 1:
        min_value, max_value = get_min_max(cropped, nodata_value)

    return grid.replace(
        array=cropped,
        x_min=x_min,
        y_max=y_max,
        nodata_value=nodata_value,
        min_value=min_value,
        max_value=max_value,
        degraded=degraded,
    )
