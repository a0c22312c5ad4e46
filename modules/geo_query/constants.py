"""Geo Query Constants

Process-wide spherical constants shared by the parameter models and shapes.
"""

import math
import sys

# Up to 16x machine epsilon of precision error in radian calculations
RAD_EPS = 16 * sys.float_info.epsilon

MAX_RADIANS_BETWEEN_POINTS = math.pi + RAD_EPS

# Volumetric mean radius of the earth
# Source: http://nssdc.gsfc.nasa.gov/planetary/factsheet/earthfact.html
EARTH_RADIUS_METERS = 6371.000 * 1000

MAX_DISTANCE_BETWEEN_POINTS = MAX_RADIANS_BETWEEN_POINTS * EARTH_RADIUS_METERS

# Finest level of the hierarchical cell tessellation
MAX_CELL_LEVEL = 30

# Standalone cover defaults
DEFAULT_MAX_COVER_CELLS = 8
DEFAULT_WORST_LEVEL = 4
DEFAULT_BEST_LEVEL = 16  # about 100m

# Cover defaults for near queries
QUERY_MAX_COVER_CELLS = 20
QUERY_WORST_LEVEL = 4
QUERY_BEST_LEVEL = 23  # about 1m

# Geographic coordinate bounds in degrees
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
