"""Coordinate Reference System (CRS) constants used throughout transitgeo.

This module defines the geographic reference frame and the numbering scheme of the
UTM zone family that every projection in transitgeo is drawn from:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326)
- UTM_NORTH_BASE_CODE / UTM_SOUTH_OFFSET: EPSG codes of the WGS84 UTM zones
"""

from pyproj import CRS

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Standard GPS coordinates in decimal degrees
# Range: latitude [-90, 90], longitude [-180, 180]
LATLON_CRS = CRS(4326)

# WGS84 / UTM zone 1N is EPSG:32601; zone 60N is EPSG:32660
UTM_NORTH_BASE_CODE = 32600

# Southern hemisphere zones live 100 codes above their northern twin (EPSG:327xx)
UTM_SOUTH_OFFSET = 100

# Each zone spans 6 degrees of longitude, starting at the antimeridian
UTM_ZONE_WIDTH_DEGREES = 6
UTM_ZONE_COUNT = 60

# Equatorial radius of the WGS84 ellipsoid in meters
EARTH_RADIUS_METERS = 6378137.0
