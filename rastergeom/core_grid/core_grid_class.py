"""### The in-memory grid. ###

A Grid is a regularly spaced, north-up raster held as a NumPy array shaped
`(height, width, bands)`, georeferenced by its upper-left origin and cell size.
Grids are immutable once created: every operation returns a new Grid.
"""

# Standard library
import math
from typing import Union, Optional, Dict, Any, Tuple

# External
import numpy as np
from osgeo import gdal, osr

# Internal
from rastergeom.utils import utils_base, utils_projection, utils_translate
from rastergeom.utils.utils_errors import DegenerateGridError
from rastergeom.bbox.bbox_class import Extent
from rastergeom.bbox.operations import _get_bbox_from_geotransform
from rastergeom.core_grid.core_grid_stats import get_min_max

# Type Aliases
NumType = Union[int, float]
ProjectionType = Union[str, int, gdal.Dataset, osr.SpatialReference]


class Grid:
    """A regularly spaced, georeferenced raster.

    Parameters
    ----------
    array : np.ndarray
        The samples, shaped `(height, width, bands)`. A 2D array is treated as a single band.
        The array is copied and the copy is made read-only.
    x_min : float
        The x-coordinate of the upper-left corner.
    y_max : float
        The y-coordinate of the upper-left corner.
    pixel_width : float
        The cell size along x. Must be positive.
    pixel_height : float
        The cell size along y. Must be positive.
    projection : str | int | gdal.Dataset | osr.SpatialReference | None, optional
        The coordinate reference system. Default: None.
    nodata_value : int | float | None, optional
        The nodata sentinel. Default: None.
    min_value : int | float | None, optional
        Advisory minimum sample value. Default: None.
    max_value : int | float | None, optional
        Advisory maximum sample value. Default: None.
    name : str, optional
        A name for the grid. Default: "grid".
    properties : dict | None, optional
        Free-form properties carried along with the grid. Default: None.
    degraded : bool, optional
        True if the grid was produced by a fallback path and its extent may not
        match its samples. Default: False.

    Raises
    ------
    DegenerateGridError
        If the array has a zero dimension, or a cell size is not positive and finite.
    """

    def __init__(
        self,
        array: np.ndarray,
        x_min: NumType,
        y_max: NumType,
        pixel_width: NumType,
        pixel_height: NumType,
        *,
        projection: Optional[ProjectionType] = None,
        nodata_value: Optional[NumType] = None,
        min_value: Optional[NumType] = None,
        max_value: Optional[NumType] = None,
        name: str = "grid",
        properties: Optional[Dict[str, Any]] = None,
        degraded: bool = False,
    ):
        utils_base._type_check(array, [np.ndarray], "array")
        utils_base._type_check(nodata_value, [int, float, np.integer, np.floating, None], "nodata_value")
        utils_base._type_check(min_value, [int, float, np.integer, np.floating, None], "min_value")
        utils_base._type_check(max_value, [int, float, np.integer, np.floating, None], "max_value")
        utils_base._type_check(name, [str], "name")
        utils_base._type_check(properties, [dict, None], "properties")
        utils_base._type_check(degraded, [bool], "degraded")

        if array.ndim == 2:
            array = array[:, :, np.newaxis]

        if array.ndim != 3:
            raise DegenerateGridError(f"Grid arrays must have 2 or 3 dimensions, got {array.ndim}")

        height, width, bands = array.shape
        if width <= 0 or height <= 0 or bands <= 0:
            raise DegenerateGridError(f"Grid dimensions must be positive, got width={width}, height={height}, bands={bands}")

        for label, size in (("pixel_width", pixel_width), ("pixel_height", pixel_height)):
            if not utils_base._check_variable_is_number_type(size) or not math.isfinite(size) or size <= 0:
                raise DegenerateGridError(f"{label} must be a positive, finite number, got {size}")

        for label, coord in (("x_min", x_min), ("y_max", y_max)):
            if not utils_base._check_variable_is_number_type(coord) or not math.isfinite(coord):
                raise ValueError(f"{label} must be a finite number, got {coord}")

        self._array = np.array(array, copy=True)
        self._array.setflags(write=False)

        self._x_min = float(x_min)
        self._y_max = float(y_max)
        self._pixel_width = float(pixel_width)
        self._pixel_height = float(pixel_height)
        self._projection = None if projection is None else utils_projection.parse_projection(projection)
        self._nodata_value = nodata_value
        self._min_value = min_value
        self._max_value = max_value
        self._name = name
        self._properties = dict(properties) if properties is not None else {}
        self._degraded = degraded

    @property
    def x_min(self) -> float:
        return self._x_min

    @property
    def y_max(self) -> float:
        return self._y_max

    @property
    def pixel_width(self) -> float:
        return self._pixel_width

    @property
    def pixel_height(self) -> float:
        return self._pixel_height

    @property
    def projection(self) -> Optional[osr.SpatialReference]:
        return self._projection

    @property
    def nodata_value(self) -> Optional[NumType]:
        return self._nodata_value

    @property
    def min_value(self) -> Optional[NumType]:
        return self._min_value

    @property
    def max_value(self) -> Optional[NumType]:
        return self._max_value

    @property
    def name(self) -> str:
        return self._name

    @property
    def properties(self) -> Dict[str, Any]:
        """A copy of the free-form properties. Use `replace` to change them."""
        return dict(self._properties)

    @property
    def degraded(self) -> bool:
        """True if the extent of the grid may not match its samples."""
        return self._degraded

    @property
    def array(self) -> np.ndarray:
        """The read-only samples, shaped `(height, width, bands)`."""
        return self._array

    @property
    def height(self) -> int:
        return self._array.shape[0]

    @property
    def width(self) -> int:
        return self._array.shape[1]

    @property
    def bands(self) -> int:
        return self._array.shape[2]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._array.shape

    @property
    def dtype(self) -> np.dtype:
        return self._array.dtype

    @property
    def x_max(self) -> float:
        return self.x_min + self.width * self.pixel_width

    @property
    def y_min(self) -> float:
        return self.y_max - self.height * self.pixel_height

    @property
    def origin(self) -> Tuple[float, float]:
        """The upper-left corner."""
        return (self.x_min, self.y_max)

    @property
    def pixel_size(self) -> Tuple[float, float]:
        return (self.pixel_width, self.pixel_height)

    @property
    def geotransform(self) -> Tuple[float, float, float, float, float, float]:
        """The north-up GDAL geotransform."""
        return (self.x_min, self.pixel_width, 0.0, self.y_max, 0.0, -self.pixel_height)

    @property
    def bbox(self):
        """The OGR formatted bbox: `[x_min, x_max, y_min, y_max]`."""
        return _get_bbox_from_geotransform(self.geotransform, self.width, self.height)

    @property
    def extent(self) -> Extent:
        return Extent.from_ogr(self.bbox)

    def has_nodata(self) -> bool:
        return self.nodata_value is not None

    def sample(self, row: int, col: int, band: int = 0) -> float:
        """Read one sample as a float.

        Raises
        ------
        IndexError
            If the pixel or band is outside the grid.
        """
        if not (0 <= row < self.height and 0 <= col < self.width and 0 <= band < self.bands):
            raise IndexError(f"Pixel ({row}, {col}, {band}) is outside a grid of shape {self.shape}")

        return float(self._array[row, col, band])

    def replace(self, **changes) -> "Grid":
        """Returns a new Grid with the given constructor arguments replaced."""
        arguments = {
            "array": self._array,
            "x_min": self.x_min,
            "y_max": self.y_max,
            "pixel_width": self.pixel_width,
            "pixel_height": self.pixel_height,
            "projection": self.projection,
            "nodata_value": self.nodata_value,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "name": self.name,
            "properties": self.properties,
            "degraded": self.degraded,
        }
        unknown = set(changes) - set(arguments)
        if unknown:
            raise TypeError(f"Unknown grid arguments: {sorted(unknown)}")

        arguments.update(changes)
        array = arguments.pop("array")
        x_min = arguments.pop("x_min")
        y_max = arguments.pop("y_max")
        pixel_width = arguments.pop("pixel_width")
        pixel_height = arguments.pop("pixel_height")

        return Grid(array, x_min, y_max, pixel_width, pixel_height, **arguments)

    def with_array(self, array: np.ndarray, **changes) -> "Grid":
        """Returns a new Grid over `array` sharing this grid's georeferencing and metadata."""
        return self.replace(array=array, **changes)

    def __repr__(self) -> str:
        return (
            f"Grid(name={self.name!r}, shape={self.shape}, dtype={self.dtype.name}, "
            f"origin={self.origin}, pixel_size={self.pixel_size}, nodata={self.nodata_value})"
        )


def create_grid(
    name: str,
    array: np.ndarray,
    extent: Union[Extent, list, tuple],
    *,
    nodata_value: Optional[NumType] = None,
    min_value: Optional[NumType] = None,
    max_value: Optional[NumType] = None,
    projection: Optional[ProjectionType] = None,
    properties: Optional[Dict[str, Any]] = None,
    degraded: bool = False,
) -> Grid:
    """Creates a Grid covering `extent` with the samples in `array`.

    The cell sizes are derived from the extent and the pixel dimensions of the array.
    When `min_value` and `max_value` are both omitted they are scanned from the first band,
    excluding nodata.

    Parameters
    ----------
    name : str
        The name of the grid.
    array : np.ndarray
        The samples, shaped `(height, width, bands)` or `(height, width)`.
    extent : Extent | list | tuple
        The extent covered by the grid. Lists and tuples are read as OGR bboxes.
    nodata_value : int | float | None, optional
        The nodata sentinel. Default: None.
    min_value : int | float | None, optional
        The minimum sample value. Default: None (scanned).
    max_value : int | float | None, optional
        The maximum sample value. Default: None (scanned).
    projection : str | int | gdal.Dataset | osr.SpatialReference | None, optional
        The coordinate reference system. Default: None.
    properties : dict | None, optional
        Free-form properties. Default: None.
    degraded : bool, optional
        Marks the grid as produced by a fallback path. Default: False.

    Returns
    -------
    Grid
        The new grid.

    Raises
    ------
    DegenerateGridError
        If the extent has no area or the array has a zero dimension.
    """
    utils_base._type_check(extent, [Extent, list, tuple], "extent")
    utils_base._type_check(array, [np.ndarray], "array")

    if not isinstance(extent, Extent):
        extent = Extent.from_ogr(list(extent))

    if array.ndim not in (2, 3) or 0 in array.shape:
        raise DegenerateGridError(f"Cannot create a grid from an array of shape {array.shape}")

    if extent.width <= 0 or extent.height <= 0:
        raise DegenerateGridError(f"Cannot create a grid over an extent without area: {extent}")

    height, width = array.shape[0], array.shape[1]

    if min_value is None and max_value is None:
        min_value, max_value = get_min_max(array, nodata_value)

    return Grid(
        array,
        extent.x_min,
        extent.y_max,
        extent.width / width,
        extent.height / height,
        projection=projection,
        nodata_value=nodata_value,
        min_value=min_value,
        max_value=max_value,
        name=name,
        properties=properties,
        degraded=degraded,
    )


def grid_from_dataset(
    dataset: gdal.Dataset,
    name: Optional[str] = None,
) -> Grid:
    """Reads a GDAL dataset into a Grid.

    Parameters
    ----------
    dataset : gdal.Dataset
        An opened raster dataset with a north-up geotransform.
    name : str | None, optional
        The name of the grid. Default: the dataset description, or "grid".

    Returns
    -------
    Grid
        The grid holding all bands of the dataset.

    Raises
    ------
    DegenerateGridError
        If the geotransform is rotated, skewed or south-up.
    """
    utils_base._type_check(dataset, [gdal.Dataset], "dataset")
    utils_base._type_check(name, [str, None], "name")

    transform = dataset.GetGeoTransform()

    if transform[2] != 0.0 or transform[4] != 0.0:
        raise DegenerateGridError(f"Rotated or skewed geotransforms are not supported: {transform}")

    if transform[5] >= 0.0:
        raise DegenerateGridError(f"Only north-up grids are supported: {transform}")

    array = dataset.ReadAsArray()
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    else:
        array = np.transpose(array, (1, 2, 0))

    nodata_value = dataset.GetRasterBand(1).GetNoDataValue()

    projection_wkt = dataset.GetProjectionRef()
    projection = projection_wkt if projection_wkt else None

    if name is None:
        name = dataset.GetDescription() or "grid"

    min_value, max_value = get_min_max(array, nodata_value)

    return Grid(
        array,
        transform[0],
        transform[3],
        transform[1],
        abs(transform[5]),
        projection=projection,
        nodata_value=nodata_value,
        min_value=min_value,
        max_value=max_value,
        name=name,
    )


def grid_to_dataset(grid: Grid) -> gdal.Dataset:
    """Writes a Grid to an in-memory GDAL dataset (MEM driver).

    Parameters
    ----------
    grid : Grid
        The grid to convert.

    Returns
    -------
    gdal.Dataset
        The in-memory dataset. It lives as long as the returned reference.

    Raises
    ------
    RuntimeError
        If the dataset cannot be created.
    """
    utils_base._type_check(grid, [Grid], "grid")

    driver = gdal.GetDriverByName("MEM")
    dataset = driver.Create(
        grid.name,
        grid.width,
        grid.height,
        grid.bands,
        utils_translate._translate_dtype_numpy_to_gdal(grid.dtype),
    )

    if dataset is None:
        raise RuntimeError(f"Could not create an in-memory dataset for {grid.name}")

    dataset.SetGeoTransform(grid.geotransform)

    if grid.projection is not None:
        dataset.SetProjection(grid.projection.ExportToWkt())

    for band_idx in range(grid.bands):
        band = dataset.GetRasterBand(band_idx + 1)
        band.WriteArray(grid.array[:, :, band_idx])

        if grid.nodata_value is not None:
            band.SetNoDataValue(float(grid.nodata_value))

    dataset.FlushCache()

    return dataset
