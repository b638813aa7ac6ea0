""" ### Core functionality for in-memory georeferenced grids. ### """

from rastergeom.utils.utils_errors import *
from .core_grid_class import *
from .core_grid_geometry import *
from .core_grid_stats import *
