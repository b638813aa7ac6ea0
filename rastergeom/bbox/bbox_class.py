"""Extent class implementation.

An Extent is an axis-aligned rectangle in world coordinates. Internally the
coordinates are stored as `x_min, y_min, x_max, y_max`, with conversions
to the OGR (`[x_min, x_max, y_min, y_max]`) and GDAL (`[x_min, y_min, x_max, y_max]`)
orderings used throughout the toolbox.
"""

# Standard library
from typing import List, Union, Tuple, Sequence, Optional

# External
import numpy as np
from beartype import beartype
from osgeo import ogr, osr

# Internal
from rastergeom.bbox.validation import (_check_is_valid_bbox, _check_bboxes_intersect,
                                        _check_bboxes_within)
from rastergeom.bbox.operations import _get_union_bboxes, _get_intersection_bboxes
from rastergeom.bbox.conversion import _get_geom_from_bbox, _get_bbox_from_geom

# Type aliases
NumType = Union[int, float]
BboxType = Sequence[NumType]
PointsType = Sequence[Sequence[NumType]]


class Extent:
    """An axis-aligned bounding rectangle in world coordinates.

    Attributes
    ----------
    x_min : float
        Minimum x-coordinate (left)
    y_min : float
        Minimum y-coordinate (bottom)
    x_max : float
        Maximum x-coordinate (right)
    y_max : float
        Maximum y-coordinate (top)

    Examples
    --------
    >>> extent = Extent(0, 5, 10, 15)
    >>> extent.as_ogr()
    [0.0, 10.0, 5.0, 15.0]
    >>> extent.width, extent.height
    (10.0, 10.0)
    >>> Extent.from_ogr([0, 10, 5, 15]) == extent
    True
    """

    __slots__ = ("x_min", "y_min", "x_max", "y_max")

    def __init__(self, x_min: NumType, y_min: NumType, x_max: NumType, y_max: NumType):
        """Initialize an Extent with explicit coordinates.

        Raises
        ------
        ValueError
            If a coordinate is not numeric, not finite, or if min > max on either axis.
        """
        try:
            coords = [float(x_min), float(y_min), float(x_max), float(y_max)]
        except (ValueError, TypeError) as e:
            raise ValueError(f"All extent coordinates must be numeric: {e}") from e

        if not all(np.isfinite(v) for v in coords):
            raise ValueError(f"Extent coordinates must be finite, got: {coords}")

        if coords[0] > coords[2]:
            raise ValueError(f"x_min ({x_min}) must be less than or equal to x_max ({x_max})")

        if coords[1] > coords[3]:
            raise ValueError(f"y_min ({y_min}) must be less than or equal to y_max ({y_max})")

        self.x_min, self.y_min, self.x_max, self.y_max = coords

    @classmethod
    @beartype
    def from_ogr(cls, bbox: BboxType) -> "Extent":
        """Create an Extent from OGR format `[x_min, x_max, y_min, y_max]`.

        Raises
        ------
        ValueError
            If the input is not a valid OGR formatted bbox
        """
        if not _check_is_valid_bbox(bbox):
            raise ValueError(f"Invalid OGR bbox format: {bbox}")

        return cls(bbox[0], bbox[2], bbox[1], bbox[3])

    @classmethod
    @beartype
    def from_gdal(cls, bbox: BboxType) -> "Extent":
        """Create an Extent from GDAL format `[x_min, y_min, x_max, y_max]`.

        Raises
        ------
        ValueError
            If the input does not contain 4 numeric values or if the extent is invalid
        """
        if len(bbox) != 4:
            raise ValueError("GDAL bbox must be a sequence of 4 numbers")

        return cls(bbox[0], bbox[1], bbox[2], bbox[3])

    @classmethod
    @beartype
    def from_points(cls, points: PointsType) -> "Extent":
        """Create the smallest Extent containing all points `[[x1, y1], [x2, y2], ...]`.

        Raises
        ------
        ValueError
            If no points are given or a point does not have two coordinates.
        """
        if len(points) == 0:
            raise ValueError("Cannot create an extent from zero points")

        if any(len(point) != 2 for point in points):
            raise ValueError("Every point must have exactly two coordinates")

        xs = [float(point[0]) for point in points]
        ys = [float(point[1]) for point in points]

        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def from_geom(cls, geom: ogr.Geometry) -> "Extent":
        """Create an Extent from the envelope of an OGR geometry."""
        return cls.from_ogr(_get_bbox_from_geom(geom))

    def as_ogr(self) -> List[float]:
        """Returns the extent in OGR format `[x_min, x_max, y_min, y_max]`."""
        return [self.x_min, self.x_max, self.y_min, self.y_max]

    def as_gdal(self) -> List[float]:
        """Returns the extent in GDAL format `[x_min, y_min, x_max, y_max]`."""
        return [self.x_min, self.y_min, self.x_max, self.y_max]

    def to_geom(self, projection_osr: Optional[osr.SpatialReference] = None) -> ogr.Geometry:
        """Returns the extent as an OGR Polygon."""
        return _get_geom_from_bbox(self.as_ogr(), projection_osr)

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)

    @property
    def lower_left(self) -> Tuple[float, float]:
        return (self.x_min, self.y_min)

    @property
    def upper_left(self) -> Tuple[float, float]:
        return (self.x_min, self.y_max)

    def corners(self) -> List[Tuple[float, float]]:
        """Returns the corners counter-clockwise, starting at the lower left."""
        return [
            (self.x_min, self.y_min),
            (self.x_max, self.y_min),
            (self.x_max, self.y_max),
            (self.x_min, self.y_max),
        ]

    def contains(self, other: "Extent") -> bool:
        """True if `other` lies completely within this extent. Shared edges count as within."""
        return _check_bboxes_within(other.as_ogr(), self.as_ogr())

    def intersects(self, other: "Extent") -> bool:
        """True if the extents overlap or touch."""
        return _check_bboxes_intersect(self.as_ogr(), other.as_ogr())

    def contains_point(self, x: NumType, y: NumType) -> bool:
        """True if the point lies inside the extent or on its boundary."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def intersection(self, other: "Extent") -> "Extent":
        """The overlapping part of two extents.

        Raises
        ------
        ValueError
            If the extents do not intersect.
        """
        return Extent.from_ogr(_get_intersection_bboxes(self.as_ogr(), other.as_ogr()))

    def union(self, other: "Extent") -> "Extent":
        """The smallest extent containing both extents."""
        return Extent.from_ogr(_get_union_bboxes(self.as_ogr(), other.as_ogr()))

    def almost_equals(self, other: "Extent", tolerance: float = 1e-9) -> bool:
        """True if every coordinate differs by at most `tolerance`."""
        return all(
            abs(a - b) <= tolerance
            for a, b in zip(self.as_gdal(), other.as_gdal())
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Extent):
            return NotImplemented
        return self.as_gdal() == other.as_gdal()

    def __hash__(self) -> int:
        return hash(tuple(self.as_gdal()))

    def __iter__(self):
        return iter(self.as_gdal())

    def __repr__(self) -> str:
        return f"Extent(x_min={self.x_min}, y_min={self.y_min}, x_max={self.x_max}, y_max={self.y_max})"
