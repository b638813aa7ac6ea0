"""Fixtures for utilities tests."""

import pytest
from osgeo import gdal, osr


@pytest.fixture
def utm32n_wkt():
    """WKT of UTM zone 32N."""
    srs = osr.SpatialReference()
    srs.ImportFromEPSG(32632)
    return srs.ExportToWkt()


@pytest.fixture
def projected_dataset():
    """A 2x2 in-memory raster in EPSG:3857."""
    srs = osr.SpatialReference()
    srs.ImportFromEPSG(3857)

    dataset = gdal.GetDriverByName("MEM").Create("projected", 2, 2, 1, gdal.GDT_Byte)
    dataset.SetGeoTransform([0.0, 1.0, 0.0, 2.0, 0.0, -1.0])
    dataset.SetProjection(srs.ExportToWkt())

    yield dataset

    dataset = None


@pytest.fixture
def unprojected_dataset():
    """A 2x2 in-memory raster without a projection."""
    dataset = gdal.GetDriverByName("MEM").Create("unprojected", 2, 2, 1, gdal.GDT_Byte)

    yield dataset

    dataset = None
