""" ### Various utility functions to work with the underlying systems. ### """

from .utils_errors import *
from .utils_base import *
from .utils_translate import *
from .utils_projection import *
