"""### Errors raised by grid operations. ###

The errors subclass the builtin exceptions the rest of the toolbox raises, so
`except ValueError` and `except RuntimeError` call sites keep working.
"""


class InvalidRegionError(ValueError):
    """The requested region does not intersect the source grid."""


class TransformError(RuntimeError):
    """A CRS reprojection or an affine inversion failed."""


class DegenerateGridError(ValueError):
    """A grid with zero or negative cell size or dimensions was requested."""
