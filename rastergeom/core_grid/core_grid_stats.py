"""### Sample range statistics for grids. ###

Scans a band line by line for its min/max, skipping nodata samples.
"""

# Standard library
from typing import Optional, Tuple, Union

# External
import numpy as np
from numba import jit

# Internal
from rastergeom.utils import utils_base


@jit(nopython=True, nogil=True, cache=True)
def _is_close(value, target, rel_tol, abs_tol):
    if np.isnan(value) or np.isnan(target):
        return np.isnan(value) and np.isnan(target)

    if value == target:
        return True

    return abs(value - target) <= max(rel_tol * max(abs(value), abs(target)), abs_tol)


@jit(nopython=True, nogil=True, cache=True)
def _band_min_max(band, nodata_value, has_nodata, rel_tol, abs_tol):
    found = False
    min_value = np.inf
    max_value = -np.inf

    rows, cols = band.shape
    for row in range(rows):
        for col in range(cols):
            value = float(band[row, col])

            if np.isnan(value):
                continue

            if has_nodata and _is_close(value, nodata_value, rel_tol, abs_tol):
                continue

            found = True
            if value < min_value:
                min_value = value
            if value > max_value:
                max_value = value

    return found, min_value, max_value


def get_min_max(
    array: np.ndarray,
    nodata_value: Optional[Union[int, float]] = None,
    band: int = 0,
    *,
    rel_tol: float = 1e-9,
    abs_tol: float = 1e-12,
) -> Tuple[Optional[float], Optional[float]]:
    """Get the minimum and maximum sample of one band, ignoring nodata and NaN.

    Nodata is matched with a tolerance, so float noise around the sentinel
    does not leak into the range.

    Parameters
    ----------
    array : np.ndarray
        The samples, shaped `(height, width, bands)` or `(height, width)`.
    nodata_value : int | float | None, optional
        The nodata sentinel. Default: None.
    band : int, optional
        The zero-based band to scan. Default: 0.
    rel_tol : float, optional
        Relative tolerance for the nodata comparison. Default: 1e-9.
    abs_tol : float, optional
        Absolute tolerance for the nodata comparison. Default: 1e-12.

    Returns
    -------
    Tuple[Optional[float], Optional[float]]
        `(min, max)`, or `(None, None)` if the band holds no valid samples.
    """
    utils_base._type_check(array, [np.ndarray], "array")
    utils_base._type_check(nodata_value, [int, float, np.integer, np.floating, None], "nodata_value")
    utils_base._type_check(band, [int], "band")

    if array.ndim == 2:
        array = array[:, :, np.newaxis]

    if array.ndim != 3:
        raise ValueError(f"array must have 2 or 3 dimensions, got {array.ndim}")

    if not 0 <= band < array.shape[2]:
        raise ValueError(f"band {band} is out of range for an array with {array.shape[2]} bands")

    has_nodata = nodata_value is not None
    found, min_value, max_value = _band_min_max(
        np.ascontiguousarray(array[:, :, band]),
        float(nodata_value) if has_nodata else 0.0,
        has_nodata,
        rel_tol,
        abs_tol,
    )

    if not found:
        return None, None

    return float(min_value), float(max_value)
