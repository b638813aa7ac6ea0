"""Unit tests for the internal bbox validation, operation and conversion functions."""

# Standard library
import math

# External
import pytest
import numpy as np
from osgeo import ogr, osr

# Internal
from rastergeom.utils.utils_errors import TransformError
from rastergeom.bbox.validation import (
    _check_is_valid_bbox,
    _check_is_valid_geotransform,
    _check_bboxes_intersect,
    _check_bboxes_within,
)
from rastergeom.bbox.operations import (
    _get_bbox_from_geotransform,
    _get_geotransform_from_bbox,
    _get_intersection_bboxes,
    _get_union_bboxes,
    _get_resolved_bbox_to_pixel_size,
    _get_rotation_cos_sin,
    _get_rotated_bbox,
)
from rastergeom.bbox.conversion import _get_geom_from_bbox, _get_bbox_from_geom


class TestValidation:
    """Tests for the bbox and geotransform validators."""

    def test_valid_bbox(self, sample_bbox_ogr):
        assert _check_is_valid_bbox(sample_bbox_ogr)
        assert _check_is_valid_bbox((0, 1, 0, 1))
        assert _check_is_valid_bbox([0, 0, 0, 0])
        assert _check_is_valid_bbox([np.float32(0), 1.0, np.int64(0), 1])

    def test_invalid_bbox(self):
        assert not _check_is_valid_bbox([0, 1, 1, 0])
        assert not _check_is_valid_bbox([1, 0, 0, 1])
        assert not _check_is_valid_bbox([0, 1, 0])
        assert not _check_is_valid_bbox([0, 1, 0, np.inf])
        assert not _check_is_valid_bbox([0, 1, np.nan, 1])
        assert not _check_is_valid_bbox([0, 1, 0, None])
        assert not _check_is_valid_bbox([True, 1, 0, 1])
        assert not _check_is_valid_bbox("0, 1, 0, 1")

    def test_valid_geotransform(self, sample_geotransform):
        assert _check_is_valid_geotransform(sample_geotransform)
        assert _check_is_valid_geotransform(tuple(sample_geotransform))

    def test_invalid_geotransform(self):
        assert not _check_is_valid_geotransform([0.0, 0.0, 0.0, 10.0, 0.0, -1.0])
        assert not _check_is_valid_geotransform([0.0, 1.0, 0.0, 10.0, 0.0, 0.0])
        assert not _check_is_valid_geotransform([0.0, 1.0, 0.0, 10.0, 0.0])
        assert not _check_is_valid_geotransform([0.0, 1.0, 0.0, np.nan, 0.0, -1.0])

    def test_intersect(self):
        assert _check_bboxes_intersect([0, 2, 0, 2], [1, 3, 1, 3])
        assert _check_bboxes_intersect([0, 1, 0, 1], [1, 2, 1, 2])
        assert not _check_bboxes_intersect([0, 1, 0, 1], [2, 3, 2, 3])
        assert not _check_bboxes_intersect([0, 1, 0, 1], [0, 1, 2, 3])

        with pytest.raises(ValueError):
            _check_bboxes_intersect([0, 1, 1, 0], [0, 1, 0, 1])

    def test_within(self):
        assert _check_bboxes_within([1, 2, 1, 2], [0, 3, 0, 3])
        assert _check_bboxes_within([0, 3, 0, 3], [0, 3, 0, 3])
        assert not _check_bboxes_within([0, 4, 0, 3], [0, 3, 0, 3])

        with pytest.raises(ValueError):
            _check_bboxes_within([0, 1], [0, 3, 0, 3])


class TestGeotransformConversion:
    """Tests for conversions between bboxes and geotransforms."""

    def test_bbox_from_geotransform(self, sample_geotransform):
        assert _get_bbox_from_geotransform(sample_geotransform, 5, 5) == [0.0, 5.0, 5.0, 10.0]

    def test_bbox_from_south_up_geotransform(self):
        assert _get_bbox_from_geotransform([0.0, 1.0, 0.0, 0.0, 0.0, 1.0], 2, 3) == [0.0, 2.0, 0.0, 3.0]

    def test_bbox_from_geotransform_invalid(self, sample_geotransform):
        with pytest.raises(TypeError):
            _get_bbox_from_geotransform(sample_geotransform, 1.5, 5)

        with pytest.raises(ValueError):
            _get_bbox_from_geotransform(sample_geotransform, -1, 5)

        with pytest.raises(ValueError):
            _get_bbox_from_geotransform([0.0, 0.0, 0.0, 10.0, 0.0, -1.0], 5, 5)

    def test_geotransform_from_bbox(self):
        assert _get_geotransform_from_bbox([0.0, 10.0, 0.0, 20.0], 10, 10) == [0.0, 1.0, 0.0, 20.0, 0.0, -2.0]

    def test_geotransform_from_bbox_invalid(self):
        with pytest.raises(ValueError):
            _get_geotransform_from_bbox([0.0, 0.0, 0.0, 20.0], 10, 10)

        with pytest.raises(ValueError):
            _get_geotransform_from_bbox([0.0, 10.0, 0.0, 20.0], 0, 10)

    def test_roundtrip(self):
        geotransform = _get_geotransform_from_bbox([100.0, 160.0, -30.0, 0.0], 6, 3)
        assert _get_bbox_from_geotransform(geotransform, 6, 3) == [100.0, 160.0, -30.0, 0.0]


class TestSetOperations:
    """Tests for intersections and unions."""

    def test_intersection(self):
        assert _get_intersection_bboxes([0, 2, 0, 2], [1, 3, 1, 3]) == [1.0, 2.0, 1.0, 2.0]

    def test_intersection_disjoint(self):
        with pytest.raises(ValueError):
            _get_intersection_bboxes([0, 1, 0, 1], [2, 3, 2, 3])

    def test_union(self):
        assert _get_union_bboxes([0, 1, 0, 1], [1, 2, 1, 2]) == [0.0, 2.0, 0.0, 2.0]
        assert _get_union_bboxes([0, 1, 0, 1], [5, 6, -5, -4]) == [0.0, 6.0, -5.0, 1.0]

    def test_union_invalid(self):
        with pytest.raises(ValueError):
            _get_union_bboxes([0, 1, 1, 0], [0, 1, 0, 1])


class TestResolveToPixelSize:
    """Tests for snapping bboxes outwards to whole pixels."""

    def test_snaps_outward(self):
        assert _get_resolved_bbox_to_pixel_size([1.2, 3.7, 1.2, 3.7], 1.0, 1.0) == [1.0, 4.0, 1.0, 4.0]

    def test_contains_input(self):
        bbox = [-47.3, 151.2, -50.01, 149.99]
        resolved = _get_resolved_bbox_to_pixel_size(bbox, 10.0, 10.0)

        assert resolved == [-50.0, 160.0, -60.0, 150.0]
        assert _check_bboxes_within(bbox, resolved)

    def test_aligned_is_unchanged(self):
        assert _get_resolved_bbox_to_pixel_size([-50.0, 150.0, -50.0, 150.0], 10.0, 10.0) == [-50.0, 150.0, -50.0, 150.0]

    def test_float_noise_does_not_grow(self):
        resolved = _get_resolved_bbox_to_pixel_size([0.0, 0.30000000000000004, 0.0, 0.3], 0.1, 0.1)

        assert resolved[1] == pytest.approx(0.3)
        assert resolved[3] == pytest.approx(0.3)

    def test_anchor(self):
        resolved = _get_resolved_bbox_to_pixel_size([1.2, 3.7, 1.2, 3.7], 1.0, 1.0, anchor=(0.5, 0.5))
        assert resolved == [0.5, 4.5, 0.5, 4.5]

    def test_degenerate_is_one_pixel(self):
        assert _get_resolved_bbox_to_pixel_size([2.0, 2.0, 3.0, 3.0], 1.0, 1.0) == [2.0, 3.0, 3.0, 4.0]

    def test_invalid(self):
        with pytest.raises(ValueError):
            _get_resolved_bbox_to_pixel_size([0, 1, 0, 1], 0.0, 1.0)

        with pytest.raises(ValueError):
            _get_resolved_bbox_to_pixel_size([0, 1, 1, 0], 1.0, 1.0)


class TestRotation:
    """Tests for rotating bboxes."""

    def test_cos_sin_exact_for_quarter_turns(self):
        assert _get_rotation_cos_sin(0) == (1.0, 0.0)
        assert _get_rotation_cos_sin(90) == (0.0, 1.0)
        assert _get_rotation_cos_sin(180.0) == (-1.0, 0.0)
        assert _get_rotation_cos_sin(270.0) == (0.0, -1.0)
        assert _get_rotation_cos_sin(360.0) == (1.0, 0.0)
        assert _get_rotation_cos_sin(-90.0) == (0.0, -1.0)

    def test_cos_sin_other_angles(self):
        cos_t, sin_t = _get_rotation_cos_sin(30.0)
        assert cos_t == pytest.approx(math.sqrt(3) / 2.0)
        assert sin_t == pytest.approx(0.5)

    def test_rotate_counter_clockwise(self):
        assert _get_rotated_bbox([0.0, 2.0, 0.0, 1.0], 90.0, (0.0, 0.0)) == [-1.0, 0.0, 0.0, 2.0]

    def test_rotate_clockwise_with_complement(self):
        # 270 degrees counter-clockwise is 90 degrees clockwise
        assert _get_rotated_bbox([0.0, 100.0, 0.0, 100.0], 270.0, (0.0, 0.0)) == [0.0, 100.0, -100.0, 0.0]

    def test_rotate_full_turn(self):
        assert _get_rotated_bbox([0.0, 2.0, 0.0, 1.0], 360.0, (5.0, 5.0)) == [0.0, 2.0, 0.0, 1.0]

    def test_rotate_45_grows_envelope(self):
        x_min, x_max, y_min, y_max = _get_rotated_bbox([-1.0, 1.0, -1.0, 1.0], 45.0, (0.0, 0.0))

        assert x_max - x_min == pytest.approx(2.0 * math.sqrt(2))
        assert y_max - y_min == pytest.approx(2.0 * math.sqrt(2))

    def test_rotate_invalid(self):
        with pytest.raises(TransformError):
            _get_rotated_bbox([0.0, 1.0, 1.0, 0.0], 90.0, (0.0, 0.0))

        with pytest.raises(TransformError):
            _get_rotated_bbox([0.0, 1.0, 0.0, 1.0], float("inf"), (0.0, 0.0))

        with pytest.raises(TransformError):
            _get_rotated_bbox([0.0, 1.0, 0.0, 1.0], 90.0, (0.0,))


class TestGeometryConversion:
    """Tests for conversions between bboxes and geometries."""

    def test_geom_from_bbox(self, sample_bbox_ogr):
        geom = _get_geom_from_bbox(sample_bbox_ogr)

        assert geom.GetGeometryName() == "POLYGON"
        assert geom.GetArea() == pytest.approx(1.0)
        assert list(geom.GetEnvelope()) == [0.0, 1.0, 0.0, 1.0]

    def test_geom_from_bbox_with_projection(self, sample_bbox_ogr):
        srs = osr.SpatialReference()
        srs.ImportFromEPSG(3857)

        geom = _get_geom_from_bbox(sample_bbox_ogr, srs)
        assert geom.GetSpatialReference().IsSame(srs)

    def test_geom_from_invalid_bbox(self):
        with pytest.raises(ValueError):
            _get_geom_from_bbox([0, 1, 1, 0])

    def test_bbox_from_geom(self, sample_polygon):
        assert _get_bbox_from_geom(sample_polygon) == [0.0, 4.0, 1.0, 3.0]

    def test_bbox_from_invalid_geom(self):
        with pytest.raises(TypeError):
            _get_bbox_from_geom([0, 1, 0, 1])

        with pytest.raises(ValueError):
            _get_bbox_from_geom(ogr.Geometry(ogr.wkbPolygon))
