"""Unit tests for the Extent class in the rastergeom.bbox module."""

# External
import pytest
import numpy as np
from osgeo import ogr, osr
from beartype.roar import BeartypeCallHintParamViolation

# Internal
from rastergeom.bbox import Extent


class TestExtentClass:
    """Tests for the Extent class."""

    def test_init(self):
        """Test Extent initialization with explicit coordinates."""
        extent = Extent(0.0, 5.0, 10.0, 15.0)
        assert extent.x_min == 0.0
        assert extent.y_min == 5.0
        assert extent.x_max == 10.0
        assert extent.y_max == 15.0

    def test_init_converts_to_float(self):
        extent = Extent(0, 5, np.int32(10), np.float32(15))
        assert all(isinstance(v, float) for v in extent)

    def test_init_validation(self):
        """Test Extent initialization validation."""
        # x_min > x_max
        with pytest.raises(ValueError):
            Extent(10.0, 0.0, 0.0, 10.0)

        # y_min > y_max
        with pytest.raises(ValueError):
            Extent(0.0, 15.0, 10.0, 5.0)

        with pytest.raises(ValueError):
            Extent(0.0, np.nan, 10.0, 15.0)

        with pytest.raises(ValueError):
            Extent(0.0, 0.0, np.inf, 15.0)

        with pytest.raises(ValueError):
            Extent("invalid", 0.0, 10.0, 15.0)

    def test_degenerate_is_allowed(self):
        extent = Extent(1.0, 1.0, 1.0, 1.0)
        assert extent.area == 0.0

    def test_from_ogr(self):
        """Test Extent.from_ogr factory method."""
        extent = Extent.from_ogr([0.0, 10.0, 5.0, 15.0])
        assert extent == Extent(0.0, 5.0, 10.0, 15.0)

        with pytest.raises(ValueError):
            Extent.from_ogr([0.0, 10.0, 15.0, 5.0])

        with pytest.raises(BeartypeCallHintParamViolation):
            Extent.from_ogr("0, 10, 5, 15")

    def test_from_gdal(self):
        """Test Extent.from_gdal factory method."""
        extent = Extent.from_gdal([0.0, 5.0, 10.0, 15.0])
        assert extent == Extent(0.0, 5.0, 10.0, 15.0)

        with pytest.raises(ValueError):
            Extent.from_gdal([0.0, 5.0, 10.0])

    def test_from_points(self):
        """Test Extent.from_points factory method."""
        extent = Extent.from_points([[0.0, 5.0], [3.0, 7.0], [10.0, 15.0]])
        assert extent == Extent(0.0, 5.0, 10.0, 15.0)

        with pytest.raises(ValueError):
            Extent.from_points([])

        with pytest.raises(ValueError):
            Extent.from_points([[0.0], [3.0, 7.0]])

    def test_from_geom(self):
        geom = ogr.CreateGeometryFromWkt("LINESTRING (0 5, 10 15)")
        assert Extent.from_geom(geom) == Extent(0.0, 5.0, 10.0, 15.0)

    def test_conversions(self):
        extent = Extent(0.0, 5.0, 10.0, 15.0)
        assert extent.as_ogr() == [0.0, 10.0, 5.0, 15.0]
        assert extent.as_gdal() == [0.0, 5.0, 10.0, 15.0]
        assert list(extent) == [0.0, 5.0, 10.0, 15.0]
        assert Extent.from_ogr(extent.as_ogr()) == extent
        assert Extent.from_gdal(extent.as_gdal()) == extent

    def test_to_geom(self):
        srs = osr.SpatialReference()
        srs.ImportFromEPSG(3857)

        geom = Extent(0.0, 5.0, 10.0, 15.0).to_geom(srs)
        assert geom.GetArea() == pytest.approx(100.0)
        assert geom.GetSpatialReference().IsSame(srs)
        assert Extent.from_geom(geom) == Extent(0.0, 5.0, 10.0, 15.0)

    def test_properties(self):
        extent = Extent(0.0, 5.0, 10.0, 25.0)
        assert extent.width == 10.0
        assert extent.height == 20.0
        assert extent.area == 200.0
        assert extent.center == (5.0, 15.0)
        assert extent.lower_left == (0.0, 5.0)
        assert extent.upper_left == (0.0, 25.0)

    def test_corners(self):
        assert Extent(0.0, 0.0, 1.0, 2.0).corners() == [(0.0, 0.0), (1.0, 0.0), (1.0, 2.0), (0.0, 2.0)]


class TestExtentPredicates:
    """Tests for containment and intersection."""

    def test_contains(self):
        outer = Extent(0.0, 0.0, 100.0, 100.0)
        assert outer.contains(Extent(10.0, 10.0, 20.0, 20.0))
        assert outer.contains(outer)
        assert not outer.contains(Extent(-50.0, -50.0, 150.0, 150.0))
        assert not outer.contains(Extent(50.0, 50.0, 150.0, 60.0))

    def test_intersects(self):
        extent = Extent(0.0, 0.0, 100.0, 100.0)
        assert extent.intersects(Extent(50.0, 50.0, 150.0, 150.0))
        assert extent.intersects(Extent(100.0, 0.0, 200.0, 100.0))
        assert not extent.intersects(Extent(200.0, 200.0, 300.0, 300.0))

    def test_contains_point(self):
        extent = Extent(0.0, 0.0, 10.0, 10.0)
        assert extent.contains_point(5.0, 5.0)
        assert extent.contains_point(0.0, 10.0)
        assert not extent.contains_point(-1.0, 5.0)

    def test_intersection(self):
        result = Extent(0.0, 0.0, 2.0, 2.0).intersection(Extent(1.0, 1.0, 3.0, 3.0))
        assert result == Extent(1.0, 1.0, 2.0, 2.0)

        with pytest.raises(ValueError):
            Extent(0.0, 0.0, 1.0, 1.0).intersection(Extent(2.0, 2.0, 3.0, 3.0))

    def test_union(self):
        result = Extent(0.0, 0.0, 1.0, 1.0).union(Extent(2.0, -1.0, 3.0, 0.5))
        assert result == Extent(0.0, -1.0, 3.0, 1.0)

    def test_almost_equals(self):
        extent = Extent(0.0, 0.0, 1.0, 1.0)
        assert extent.almost_equals(Extent(1e-12, 0.0, 1.0, 1.0 - 1e-12))
        assert not extent.almost_equals(Extent(0.1, 0.0, 1.0, 1.0))
        assert extent.almost_equals(Extent(0.1, 0.0, 1.0, 1.0), tolerance=0.2)

    def test_equality_and_hash(self):
        assert Extent(0, 0, 1, 1) == Extent(0.0, 0.0, 1.0, 1.0)
        assert Extent(0, 0, 1, 1) != Extent(0, 0, 1, 2)
        assert Extent(0, 0, 1, 1) != [0.0, 0.0, 1.0, 1.0]
        assert len({Extent(0, 0, 1, 1), Extent(0.0, 0.0, 1.0, 1.0)}) == 1

    def test_repr(self):
        assert repr(Extent(0, 1, 2, 3)) == "Extent(x_min=0.0, y_min=1.0, x_max=2.0, y_max=3.0)"
