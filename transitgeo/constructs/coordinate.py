from __future__ import annotations

import math
import numbers
from typing import TYPE_CHECKING, Any, NamedTuple

from shapely.geometry import Point

from transitgeo.exceptions import OutOfRangeError

if TYPE_CHECKING:
    from transitgeo.constructs.zone import ZoneTransform


class GeographicCoordinate(NamedTuple):
    """
    Represents a single point on the Earth's surface in WGS84 (EPSG:4326).

    A GeographicCoordinate is an immutable (latitude, longitude) pair in decimal degrees.
    Every API in transitgeo takes and returns geographic values in this (lat, lon) order;
    the swap to the (lon, lat) order pyproj expects happens only inside
    `ZoneTransform.forward` and `ZoneTransform.inverse`.

    Attributes:
        lat: The latitude in decimal degrees (range: -90 to 90)
        lon: The longitude in decimal degrees (range: -180 to 180)

    Examples:
        >>> from transitgeo.constructs.coordinate import GeographicCoordinate
        >>> nyc = GeographicCoordinate(40.7128, -74.0060)
        >>> print(nyc.lat, nyc.lon)
        40.7128 -74.006
        >>> print(nyc.geom)  # shapely points are (x=lon, y=lat)
        POINT (-74.006 40.7128)
    """

    lat: float
    lon: float

    def __repr__(self):
        return f"GeographicCoordinate(lat={self.lat}, lon={self.lon})"

    @property
    def geom(self) -> Point:
        return Point(self.lon, self.lat)

    def check_range(self) -> GeographicCoordinate:
        """
        Verify that latitude and longitude lie within their valid domains.

        Missing (None), non-numeric and NaN values fail the check as well.

        Returns:
            This coordinate, unchanged

        Raises:
            OutOfRangeError: If latitude is outside [-90, 90] or longitude is outside [-180, 180]
        """
        for name, value in (("latitude", self.lat), ("longitude", self.lon)):
            if not isinstance(value, numbers.Real):
                raise OutOfRangeError(f"{name} {value!r} is not a number")
        if not -90 <= self.lat <= 90:
            raise OutOfRangeError(f"latitude {self.lat} is not within [-90, 90]")
        if not -180 <= self.lon <= 180:
            raise OutOfRangeError(
                f"longitude {self.lon} is not within UTM zone limits [-180, 180]"
            )
        return self


class ProjectedCoordinate(NamedTuple):
    """
    Represents a point in the planar frame of one UTM zone.

    A ProjectedCoordinate is only meaningful relative to the transform that produced it.
    Two projected coordinates from different zones must never be combined in the same
    distance, length or area computation.

    Attributes:
        x: The easting in meters
        y: The northing in meters
        transform: The ZoneTransform that produced this coordinate
        origin: The geographic coordinate this point was projected from
        coordinate_id: An optional identifier carried over from the source record
    """

    x: float
    y: float
    transform: ZoneTransform
    origin: GeographicCoordinate
    coordinate_id: Any = None

    def __repr__(self):
        return (
            f"ProjectedCoordinate(coordinate_id={self.coordinate_id}, x={self.x}, "
            f"y={self.y}, zone={self.transform.zone_id.code})"
        )

    @property
    def geom(self) -> Point:
        return Point(self.x, self.y)

    @property
    def is_finite(self) -> bool:
        """True when both ordinates are present and finite."""
        if self.x is None or self.y is None:
            return False
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_geographic(self) -> GeographicCoordinate:
        """
        Map this coordinate back to WGS84 using the inverse of its own transform.

        Returns:
            The geographic coordinate at this planar position
        """
        lat, lon = self.transform.inverse(self.x, self.y)
        return GeographicCoordinate(lat, lon)
