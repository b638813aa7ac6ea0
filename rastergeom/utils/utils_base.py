"""### Generic utility functions. ###

Type checks shared across the toolbox.
"""

# Standard Library
from typing import Any, Union, List, Tuple

# External
import numpy as np


def _check_variable_is_number_type(variable: Any) -> bool:
    """Check if variable is a number.

    Booleans and numpy scalars are handled: numpy integers and floats count
    as numbers, booleans do not.

    Parameters
    ----------
    variable : Any
        The variable to check.

    Returns
    -------
    bool
        True if the variable is a number type, False otherwise.
    """
    if variable is None or isinstance(variable, (bool, np.bool_)):
        return False

    if isinstance(variable, (float, int, np.integer, np.floating)):
        return True

    return False


def _normalise_type(t):
    """Convert a type specification to a standard format.

    Parameters
    ----------
    t : Any
        The type specification to normalize.

    Returns
    -------
    Union[type, Tuple[type]]
        The normalized type specification.

    Raises
    ------
    TypeError
        If the type specification is invalid.
    """
    if t is None:
        return type(None)
    if isinstance(t, type):
        return t
    if isinstance(t, (list, tuple)):
        if not all(isinstance(st, type) for st in t):
            raise TypeError(f"Invalid nested type specification: {t}")
        return tuple(t)
    raise TypeError(f"Invalid type specification: {t}")


def _type_check(
    variable: Any,
    types: Union[List[Union[type, List[type], None]], Tuple[Union[type, List[type], None], ...]],
    name: str = "",
    *,
    throw_error: bool = True,
) -> bool:
    """Type check function that supports nested types and collections.

    Parameters
    ----------
    variable : Any
        The variable to check.
    types : Union[List[Union[type, List[type], None]], Tuple[Union[type, List[type], None], ...]]
        The type or types to check against.
    name : str, optional
        The name of the variable to check.
    throw_error : bool, optional
        Whether to throw an error if the type check fails.

    Returns
    -------
    bool
        True if the variable matches any of the types, False otherwise.

    Raises
    ------
    TypeError
        If the variable is not found in the list of types

    Examples
    --------
    >>> _type_check("hello", [str])  # True
    >>> _type_check([1, 2, 3], [[int]])  # True
    >>> _type_check([1, "a"], [[int]])  # False
    >>> _type_check(None, [str, None])  # True
    """
    if not isinstance(name, str):
        raise TypeError("name must be a string")
    if not isinstance(types, (list, tuple)):
        raise TypeError("types must be a list or tuple")

    valid_types = [_normalise_type(t) for t in types]

    for valid_type in valid_types:
        # Nested specification, e.g. [[int, float]] for a sequence of numbers
        if isinstance(valid_type, tuple):
            if isinstance(variable, (list, tuple)):
                if not variable or all(isinstance(item, valid_type) for item in variable):
                    return True
        elif isinstance(variable, valid_type):
            return True

    if throw_error:
        actual_type = type(variable).__name__
        if isinstance(variable, (list, tuple)):
            actual_type = f"[{type(variable[0]).__name__}]" if variable else "[]"

        expected_types = []
        for t in valid_types:
            if isinstance(t, tuple):
                expected_types.append(f"[{','.join(st.__name__ for st in t)}]")
            else:
                expected_types.append(t.__name__)

        raise TypeError(
            f"Type mismatch for '{name}': Expected {' or '.join(expected_types)}, got {actual_type}"
        )

    return False

