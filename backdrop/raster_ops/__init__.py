"""
Raster operations module.
"""

# Import all functions from submodules
from .pixel_metrics import *
from .edge_detection import *
from .region_growing import *
from .raster_utils import *

# from .edge_detection import detect_edges, dask_edge_mask, sobel_magnitude, etc.
# from .raster_utils import as_pixel_array, open_image, save_image, etc.
