""" ### Geometric transformations of grids: pad, crop, clip and rotate. ### """

from .pad import *
from .crop import *
from .clip import *
from .rotate import *
