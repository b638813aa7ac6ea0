"""Common test fixtures for all test modules."""

import os
import sys
import pytest
import numpy as np
from osgeo import ogr, osr

# Add the parent directory to sys.path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rastergeom.bbox import Extent
from rastergeom.core_grid import create_grid


@pytest.fixture
def epsg_3857() -> osr.SpatialReference:
    """Web Mercator spatial reference."""
    srs = osr.SpatialReference()
    srs.ImportFromEPSG(3857)
    srs.SetAxisMappingStrategy(osr.OAMS_TRADITIONAL_GIS_ORDER)
    return srs


@pytest.fixture
def epsg_4326() -> osr.SpatialReference:
    """WGS84 spatial reference."""
    srs = osr.SpatialReference()
    srs.ImportFromEPSG(4326)
    srs.SetAxisMappingStrategy(osr.OAMS_TRADITIONAL_GIS_ORDER)
    return srs


@pytest.fixture
def scenario_array() -> np.ndarray:
    """10x10 single band samples valued 1..100, row by row."""
    return np.arange(1, 101, dtype=np.float32).reshape(10, 10, 1)


@pytest.fixture
def scenario_grid(scenario_array):
    """10x10 grid of 10 unit cells, origin (0, 100), nodata -9999, in EPSG:3857."""
    return create_grid(
        "scenario",
        scenario_array,
        Extent(0.0, 0.0, 100.0, 100.0),
        nodata_value=-9999.0,
        projection=3857,
    )


@pytest.fixture
def multiband_grid():
    """10x10 three band uint8 grid of 10 unit cells without nodata, in EPSG:3857."""
    array = np.zeros((10, 10, 3), dtype=np.uint8)
    array[:, :, 0] = 10
    array[:, :, 1] = 20
    array[:, :, 2] = 30

    return create_grid(
        "multiband",
        array,
        Extent(0.0, 0.0, 100.0, 100.0),
        projection=3857,
    )


@pytest.fixture
def unreferenced_grid():
    """4x6 int16 grid without nodata or projection, origin (0, 4), 1 unit cells."""
    array = np.arange(24, dtype=np.int16).reshape(4, 6)

    return create_grid("unreferenced", array, Extent(0.0, 0.0, 6.0, 4.0))


@pytest.fixture
def make_polygon():
    """Factory for polygons from a list of (x, y) vertices."""
    def _make_polygon(points, srs=None):
        ring = ogr.Geometry(ogr.wkbLinearRing)
        for x, y in points:
            ring.AddPoint_2D(float(x), float(y))
        ring.AddPoint_2D(float(points[0][0]), float(points[0][1]))

        polygon = ogr.Geometry(ogr.wkbPolygon)
        polygon.AddGeometry(ring)

        if srs is not None:
            polygon.AssignSpatialReference(srs)

        return polygon

    return _make_polygon


@pytest.fixture
def make_point():
    """Factory for points, optionally with a spatial reference."""
    def _make_point(x, y, srs=None):
        point = ogr.Geometry(ogr.wkbPoint)
        point.AddPoint_2D(float(x), float(y))

        if srs is not None:
            point.AssignSpatialReference(srs)

        return point

    return _make_point
