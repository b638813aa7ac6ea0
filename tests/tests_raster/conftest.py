"""Fixtures for raster tests."""

import pytest
import numpy as np

from rastergeom.bbox import Extent
from rastergeom.core_grid import create_grid, TransformError
from rastergeom.utils import utils_projection


@pytest.fixture
def wide_grid():
    """2x4 int32 grid of 1 unit cells over [0, 4] x [0, 2], nodata -1, in EPSG:3857.

    Samples:
        [[1, 2, 3, 4],
         [5, 6, 7, 8]]
    """
    array = np.arange(1, 9, dtype=np.int32).reshape(2, 4)

    return create_grid(
        "wide",
        array,
        Extent(0.0, 0.0, 4.0, 2.0),
        nodata_value=-1,
        projection=3857,
    )


@pytest.fixture
def lower_triangle(make_polygon):
    """Triangle whose hypotenuse runs between pixel centres of the scenario grid."""
    return make_polygon([(20.0, 20.0), (64.0, 20.0), (20.0, 64.0)])


@pytest.fixture
def failing_reprojection(monkeypatch):
    """Makes every geometry reprojection fail."""
    def _fail(*args, **kwargs):
        raise TransformError("no transformation available")

    monkeypatch.setattr(utils_projection, "reproject_geometry", _fail)
