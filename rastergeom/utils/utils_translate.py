"""### GDAL Enum-like Functions. ###

Functions to translate between **GDAL** and **NumPy** datatypes, and to pick
fill values that a given datatype can hold.
"""

# Standard Library
from typing import Tuple, Union

# External
import numpy as np
from osgeo import gdal_array


def _translate_dtype_numpy_to_gdal(numpy_datatype: Union[str, np.dtype]) -> int:
    """Translates the NumPy datatype into a GDAL datatype integer.

    Parameters
    ----------
    numpy_datatype : Union[str, np.dtype]
        The NumPy datatype.

    Returns
    -------
    int
        The GDAL datatype integer.

    Raises
    ------
    TypeError
        If numpy_datatype is None or not of correct type.
    ValueError
        If numpy_datatype cannot be converted to GDAL type.
    """
    if numpy_datatype is None:
        raise TypeError("numpy_datatype cannot be None")

    if not isinstance(numpy_datatype, (np.dtype, str)):
        raise TypeError(f"numpy_datatype must be numpy.dtype or str. Got: {type(numpy_datatype)}")

    try:
        gdal_type = gdal_array.NumericTypeCodeToGDALTypeCode(np.dtype(numpy_datatype))

        if gdal_type is None:
            raise ValueError(f"Could not convert {numpy_datatype} to GDAL type")

        return gdal_type
    except Exception as e:
        raise ValueError(f"Failed to convert {numpy_datatype} to GDAL type") from e


def _get_default_nodata_value(dtype: Union[np.dtype, str]) -> Union[float, int]:
    """Returns the nodata value assigned to a grid of the given dtype when it has none.

    Parameters
    ----------
    dtype : Union[np.dtype, str]
        The numpy data type.

    Returns
    -------
    Union[float, int]
        The default nodata value.

    Raises
    ------
    TypeError
        If dtype is None or invalid type
    ValueError
        If dtype is not recognized
    """
    if dtype is None:
        raise TypeError("dtype cannot be None")

    if not isinstance(dtype, (np.dtype, str)):
        raise TypeError(f"dtype must be numpy.dtype or str, got: {type(dtype)}")

    datatypes = {
        "int8": -127,
        "int16": -32767,
        "int32": -2147483647,
        "int64": -9223372036854775807,
        "uint8": 255,
        "uint16": 65535,
        "uint32": 4294967295,
        "uint64": 18446744073709551615,
        "float16": -9999.0,
        "float32": -9999.0,
        "float64": -9999.0,
    }

    try:
        dtype_name = np.dtype(dtype).name
    except TypeError as e:
        raise ValueError(f"Invalid dtype: {dtype}") from e

    if dtype_name not in datatypes:
        raise ValueError(f"Unsupported dtype: {dtype_name}")

    return datatypes[dtype_name]


def _get_range_for_numpy_datatype(numpy_dtype: Union[str, np.dtype]) -> Tuple[Union[int, float], Union[int, float]]:
    """Returns the range of values that can be represented by a given numpy dtype.

    Parameters
    ----------
    numpy_dtype : Union[str, np.dtype]
        The numpy dtype.

    Returns
    -------
    Tuple[Union[int, float], Union[int, float]]
        The minimum and maximum values that can be represented by the dtype.

    Raises
    ------
    ValueError
        If numpy_dtype is not a recognized datatype.
    """
    try:
        dtype = np.dtype(numpy_dtype)
    except TypeError as e:
        raise ValueError(f"Invalid dtype: {numpy_dtype}") from e

    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return int(info.min), int(info.max)

    if np.issubdtype(dtype, np.floating):
        info = np.finfo(dtype)
        return float(info.min), float(info.max)

    raise ValueError(f"Unsupported dtype: {dtype.name}")


def _check_is_value_within_dtype_range(
    value: Union[int, float],
    numpy_dtype: Union[str, np.dtype],
) -> bool:
    """Checks if a value is within the range of a numpy datatype.

    NaN is only representable by floating dtypes.

    Parameters
    ----------
    value : Union[int, float]
        The value to check.
    numpy_dtype : Union[str, np.dtype]
        The numpy dtype.

    Returns
    -------
    bool
        True if the value can be stored in the dtype without changing.

    Raises
    ------
    TypeError
        If value is None or not numeric.
    """
    if value is None:
        raise TypeError("Value cannot be None")

    if not isinstance(value, (int, float, np.integer, np.floating)):
        raise TypeError(f"Value must be numeric, got: {type(value)}")

    dtype = np.dtype(numpy_dtype)

    if np.isnan(value):
        return bool(np.issubdtype(dtype, np.floating))

    if np.issubdtype(dtype, np.integer) and float(value) != int(value):
        return False

    min_val, max_val = _get_range_for_numpy_datatype(dtype)
    return min_val <= value <= max_val


def _get_dtype_holding_value(
    dtype: Union[str, np.dtype],
    value: Union[int, float],
) -> np.dtype:
    """Returns `dtype` if it can hold `value`, otherwise the smallest promotion that can.

    Parameters
    ----------
    dtype : Union[str, np.dtype]
        The current dtype of an array.
    value : Union[int, float]
        The fill value that must be stored.

    Returns
    -------
    np.dtype
        A dtype able to hold both the existing values and `value`.
    """
    dtype = np.dtype(dtype)

    if _check_is_value_within_dtype_range(value, dtype):
        return dtype

    # NaN is not an integer either
    if isinstance(value, (float, np.floating)) and not float(value).is_integer():
        value_dtype = np.dtype("float64")
    else:
        value_dtype = np.min_scalar_type(int(value))

    return np.promote_types(dtype, value_dtype)
