"""
# Geometric Transformations for Gridded Rasters

Rastergeom resizes, clips and rotates regularly spaced, georeferenced grids held in memory.
It keeps the nodata sentinel and the sample value range of a grid consistent through every
operation, and reports degraded results instead of silently returning mismatched extents.

Please note that rastergeom is under active development, and its API may not be entirely stable.

**Dependencies** </br>
`numpy` (https://numpy.org/) </br>
`numba` (https://numba.pydata.org/) </br>
`gdal` (https://gdal.org/) </br>
`beartype` (https://github.com/beartype/beartype) </br>

**Installation** </br>
Using pip:
```
pip install gdal
pip install rastergeom
```

**Quickstart**

### Grow a grid to a larger extent
```python
import numpy as np
import rastergeom as rg

grid = rg.create_grid(
    "elevation",
    np.zeros((10, 10), dtype="float32"),
    rg.Extent(0, 0, 100, 100),
    nodata_value=-9999.0,
    projection=3857,
)

clipped = rg.grid_clip(grid, rg.Extent(-50, -50, 150, 150))

clipped.shape
>>> (20, 20, 1)
```

### Rotate a grid about its lower-left corner
```python
rotated = rg.grid_rotate(grid, 90.0)

rotated.extent, rotated.degraded
>>> (Extent(x_min=0.0, y_min=-100.0, x_max=100.0, y_max=0.0), False)
```
"""
from osgeo import gdal, ogr, osr

from .utils import *
from .bbox import *
from .core_grid import *
from .raster import *

gdal.UseExceptions()
ogr.UseExceptions()
osr.UseExceptions()

__version__ = "0.1.0"
