# Standard library
import sys
import os
import pytest
from osgeo import ogr, osr
from typing import List

# Add the parent directory to sys.path to allow imports from the rastergeom package
sys.path.append(os.path.join(os.path.dirname(__file__), "../.."))


# Fixtures
@pytest.fixture
def sample_bbox_ogr() -> List[float]:
    """Sample OGR bbox: [x_min, x_max, y_min, y_max]."""
    return [0.0, 1.0, 0.0, 1.0]

@pytest.fixture
def sample_geotransform() -> List[float]:
    """Sample GDAL geotransform."""
    return [0.0, 1.0, 0.0, 10.0, 0.0, -1.0]

@pytest.fixture
def sample_polygon() -> ogr.Geometry:
    """Triangle with the envelope [0, 4, 1, 3]."""
    return ogr.CreateGeometryFromWkt("POLYGON ((0 1, 4 1, 2 3, 0 1))")
