"""### Clip grids. ###

Clips a grid to a geometry or an extent. Targets inside the grid are cropped, targets
reaching beyond the grid first grow the grid with nodata and are then cropped.
"""

# Standard library
from dataclasses import dataclass
from typing import Union, Sequence, Optional

# External
from osgeo import ogr

# Internal
from rastergeom.utils import utils_base, utils_translate
from rastergeom.utils.utils_errors import InvalidRegionError
from rastergeom.bbox.bbox_class import Extent
from rastergeom.bbox.conversion import _get_bbox_from_geom
from rastergeom.core_grid.core_grid_class import Grid
from rastergeom.core_grid.core_grid_geometry import resolve_extent_to_grid
from rastergeom.core_grid.core_grid_stats import get_min_max
from rastergeom.raster.crop import grid_crop, _get_geometry_in_grid_crs
from rastergeom.raster.pad import (
    get_pad_spec,
    grid_pad,
    MULTIBAND_NODATA,
    MULTIBAND_MIN,
    MULTIBAND_MAX,
)

# Type Aliases
NumType = Union[int, float]
TargetType = Union[Extent, Sequence[NumType], ogr.Geometry]


@dataclass(frozen=True)
class FullyContained:
    """The target lies within the grid and is cropped directly."""
    extent: Extent


@dataclass(frozen=True)
class RequiresGrowth:
    """The target reaches beyond the grid, which must be grown before cropping."""
    extent: Extent


ClipPlan = Union[FullyContained, RequiresGrowth]


@dataclass(frozen=True)
class ClipContext:
    """The working state of one clip: the cell sizes, the extent being produced and its nodata."""
    pixel_width: float
    pixel_height: float
    extent: Extent
    nodata_value: Optional[NumType]


def plan_clip(
    grid_extent: Extent,
    target_extent: Extent,
) -> ClipPlan:
    """Decides how a grid is clipped to a target extent.

    Parameters
    ----------
    grid_extent : Extent
        The extent of the grid.
    target_extent : Extent
        The extent of the clip target, in the grid CRS.

    Returns
    -------
    FullyContained | RequiresGrowth
        `FullyContained` when the grid contains the target (shared edges count as inside),
        otherwise `RequiresGrowth`.

    Raises
    ------
    InvalidRegionError
        If the target does not intersect the grid.
    """
    utils_base._type_check(grid_extent, [Extent], "grid_extent")
    utils_base._type_check(target_extent, [Extent], "target_extent")

    if not grid_extent.intersects(target_extent):
        raise InvalidRegionError(f"{target_extent} does not intersect the grid at {grid_extent}")

    if grid_extent.contains(target_extent):
        return FullyContained(target_extent)

    return RequiresGrowth(target_extent)


def _get_clip_context(
    grid: Grid,
    target_extent: Extent,
) -> ClipContext:
    """Aligns the target to the pixels of the grid and picks the nodata of the grown grid."""
    resolved = resolve_extent_to_grid(
        target_extent,
        grid.pixel_width,
        grid.pixel_height,
        anchor=grid.origin,
    )

    if grid.bands > 1:
        nodata_value = MULTIBAND_NODATA
    elif grid.has_nodata():
        nodata_value = grid.nodata_value
    else:
        nodata_value = utils_translate._get_default_nodata_value(grid.dtype)

    return ClipContext(grid.pixel_width, grid.pixel_height, resolved, nodata_value)


def _grow_to_context(
    grid: Grid,
    context: ClipContext,
    verbose: int = 0,
) -> Grid:
    """Pads a grid so it covers the extent of the context exactly."""
    pad_spec = get_pad_spec(grid.extent, context.extent, context.pixel_width, context.pixel_height)

    if verbose > 0:
        print(f"Padding {grid.name} by {pad_spec} to {context.extent}")

    padded = grid_pad(grid, pad_spec, fill_value=context.nodata_value)

    if padded.bands > 1:
        return padded.replace(
            nodata_value=MULTIBAND_NODATA,
            min_value=MULTIBAND_MIN,
            max_value=MULTIBAND_MAX,
        )

    min_value, max_value = get_min_max(padded.array, padded.nodata_value)

    return padded.replace(min_value=min_value, max_value=max_value)


def _clip_to_extent(
    grid: Grid,
    extent: Extent,
    all_touch: bool,
    verbose: int,
) -> Grid:
    plan = plan_clip(grid.extent, extent)

    if verbose > 0:
        print(f"Clipping {grid.name}: {type(plan).__name__}")

    if isinstance(plan, FullyContained):
        return grid_crop(grid, plan.extent, all_touch=all_touch)

    return _grow_to_context(grid, _get_clip_context(grid, plan.extent), verbose=verbose)


def _clip_to_geometry(
    grid: Grid,
    geom: ogr.Geometry,
    all_touch: bool,
    strict: bool,
    verbose: int,
) -> Grid:
    if geom.IsEmpty():
        raise InvalidRegionError("Cannot clip to an empty geometry.")

    geom, failed = _get_geometry_in_grid_crs(grid, geom, strict=strict)

    envelope = Extent.from_ogr(_get_bbox_from_geom(geom))
    plan = plan_clip(grid.extent, envelope)

    if verbose > 0:
        print(f"Clipping {grid.name} to geometry: {type(plan).__name__}")

    if isinstance(plan, FullyContained):
        clipped = grid_crop(grid, geom, all_touch=all_touch)
    else:
        grown = _clip_to_extent(grid, plan.extent, all_touch, verbose)
        clipped = grid_crop(grown, geom, all_touch=all_touch)

    if failed:
        return clipped.replace(degraded=True)

    return clipped


def grid_clip(
    grid: Grid,
    target: TargetType,
    *,
    all_touch: bool = False,
    strict: bool = False,
    verbose: int = 0,
) -> Grid:
    """Clips a grid to a geometry or an extent.

    If the target lies within the grid, the grid is cropped to it. If the target reaches
    beyond the grid, the target is aligned to the pixels of the grid and the grid is padded
    to cover it. New pixels hold the nodata value for single band grids and -1 for multi band
    grids. Geometry targets are then cropped to the geometry itself.

    After padding, multi band grids get the metadata `nodata=-1, min=0, max=255`, and
    single band grids have their min/max rescanned, excluding nodata.

    Parameters
    ----------
    grid : Grid
        The grid to clip.
    target : Extent | Sequence[int | float] | ogr.Geometry
        The clip target. Sequences are read as OGR bboxes `[x_min, x_max, y_min, y_max]`.
        Geometries with a spatial reference are reprojected to the grid CRS.
    all_touch : bool, optional
        For polygon targets, keep every pixel touched by the polygon. Default: False.
    strict : bool, optional
        Raise if a geometry target cannot be reprojected. Otherwise a warning is issued,
        the geometry is used in its given coordinates and the result is flagged
        `degraded`. Default: False.
    verbose : int, optional
        Print the chosen plan and pads when above 0. Default: 0.

    Returns
    -------
    Grid
        The clipped grid.

    Raises
    ------
    InvalidRegionError
        If the target does not intersect the grid.
    TransformError
        If `strict` is True and a geometry target cannot be reprojected to the grid CRS.

    Examples
    --------
    >>> clipped = grid_clip(grid, Extent(-50, -50, 150, 150))
    >>> clipped.extent
    Extent(x_min=-50.0, y_min=-50.0, x_max=150.0, y_max=150.0)
    """
    utils_base._type_check(grid, [Grid], "grid")
    utils_base._type_check(target, [Extent, list, tuple, ogr.Geometry], "target")
    utils_base._type_check(all_touch, [bool], "all_touch")
    utils_base._type_check(strict, [bool], "strict")
    utils_base._type_check(verbose, [int], "verbose")

    if isinstance(target, ogr.Geometry):
        return _clip_to_geometry(grid, target, all_touch, strict, verbose)

    if not isinstance(target, Extent):
        target = Extent.from_ogr(target)

    return _clip_to_extent(grid, target, all_touch, verbose)
