"""Standard column names used for GTFS shape data held in pandas DataFrames.

These match the field names of the GTFS `shapes.txt` file so a frame read straight
from a feed can be handed to `ShapePoint.from_dataframe` without renaming.
"""

# Identifier of the shape a point belongs to
SHAPE_ID_KEY = "shape_id"

# Latitude and longitude of the point, in WGS84 decimal degrees
SHAPE_LAT_KEY = "shape_pt_lat"
SHAPE_LON_KEY = "shape_pt_lon"

# Position of the point along the shape; non-negative and increasing
SHAPE_SEQUENCE_KEY = "shape_pt_sequence"

# Optional distance traveled along the shape from the first point
SHAPE_DIST_TRAVELED_KEY = "shape_dist_traveled"
