"""### Bounding Box Module ###

Provides tools for creating, manipulating, and validating bounding boxes.

The module provides both function-based and object-oriented interfaces:
- Function-based: Direct manipulation of OGR bbox coordinate lists, in the submodules
- Object-oriented: Extent class with methods for common operations

Public Classes:
--------------
Extent : Axis-aligned rectangle in world coordinates
"""

from .bbox_class import Extent


__all__ = [
    "Extent",
]
