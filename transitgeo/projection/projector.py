from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Optional, Tuple

from pyproj import CRS
from shapely.geometry import Point

from transitgeo.constructs.coordinate import GeographicCoordinate, ProjectedCoordinate
from transitgeo.constructs.zone import CrsRegistry, TransformCache, ZoneId, ZoneTransform
from transitgeo.exceptions import InvalidPointError, OutOfRangeError
from transitgeo.utils.crs import UTM_ZONE_COUNT, UTM_ZONE_WIDTH_DEGREES

log = logging.getLogger(__name__)


def utm_zone_for_longitude(lon: float) -> int:
    """
    Find the UTM zone number whose 6 degree band contains a longitude.

    A longitude sitting exactly on a band edge belongs to the band that starts there.
    180 degrees belongs to zone 60, the same as 179.999.

    Args:
        lon: The longitude in decimal degrees

    Returns:
        The zone number, 1 to 60

    Raises:
        OutOfRangeError: If the longitude is missing, not a number, or outside [-180, 180]

    Examples:
        >>> utm_zone_for_longitude(-74.0060)
        18
        >>> utm_zone_for_longitude(180.0)
        60
    """
    if not isinstance(lon, numbers.Real):
        raise OutOfRangeError(f"longitude {lon!r} is not a number")
    if not -180 <= lon <= 180:
        raise OutOfRangeError(f"longitude {lon} is not within UTM zone limits [-180, 180]")

    zone = math.floor((lon + 180) / UTM_ZONE_WIDTH_DEGREES)
    if zone == UTM_ZONE_COUNT:
        zone -= 1

    return zone + 1


class CoordinateProjector:
    """
    Projects WGS84 coordinates into the UTM zone that best fits them, and back.

    The projector holds no global state: zone transforms live in the TransformCache it
    is given, which the caller owns for the length of one processing session (for
    example one feed validation run). Two projectors with separate caches never see
    each other's transforms.

    Every method takes and returns geographic values in (lat, lon) order.

    Args:
        cache: The session transform cache. A fresh one is created when omitted.
        crs_registry: A callable resolving EPSG codes into pyproj CRS objects.
            Default is `pyproj.CRS.from_epsg`.

    Examples:
        >>> from transitgeo.constructs.coordinate import GeographicCoordinate
        >>> from transitgeo.projection.projector import CoordinateProjector
        >>>
        >>> projector = CoordinateProjector()
        >>> nyc = GeographicCoordinate(40.7128, -74.0060)
        >>> projector.zone_id_for(nyc).code
        32618
        >>> p = projector.project(nyc)
        >>> back = projector.unproject(p.transform, (p.x, p.y))
    """

    def __init__(
        self,
        cache: Optional[TransformCache] = None,
        crs_registry: Optional[CrsRegistry] = None,
    ):
        self.cache = cache if cache is not None else TransformCache()
        self.crs_registry = crs_registry if crs_registry is not None else CRS.from_epsg

    def zone_id_for(self, coordinate: GeographicCoordinate) -> ZoneId:
        """
        Pick the UTM zone for a reference coordinate.

        The zone number comes from the longitude, and the hemisphere is south iff the
        latitude is negative.

        Args:
            coordinate: The reference coordinate

        Returns:
            The ZoneId, e.g. EPSG:32618 for New York or EPSG:32756 for Sydney

        Raises:
            OutOfRangeError: If latitude or longitude is missing or outside its valid domain
        """
        coordinate.check_range()
        number = utm_zone_for_longitude(coordinate.lon)
        return ZoneId(number, south=coordinate.lat < 0)

    def transform_for(self, zone_id: ZoneId) -> ZoneTransform:
        """
        Get the transform for a zone, building and caching it on first use.

        Raises:
            UnsupportedZoneError: If the CRS registry has no usable definition for the zone
        """
        return self.cache.get_or_build(
            zone_id, lambda z: ZoneTransform.build(z, self.crs_registry)
        )

    def project(
        self,
        coordinate: GeographicCoordinate,
        transform: Optional[ZoneTransform] = None,
        coordinate_id: Any = None,
    ) -> ProjectedCoordinate:
        """
        Project a geographic coordinate into planar meters.

        When no transform is given, the coordinate's own zone is used. Pass a transform
        to keep several coordinates in one shared frame even when some of them fall
        outside that zone's band.

        A transform that fails numerically yields a ProjectedCoordinate whose
        `is_finite` is False; callers building geometries must check it.

        Args:
            coordinate: The coordinate to project, in (lat, lon) order
            transform: The zone transform to use. Default is the coordinate's own zone.
            coordinate_id: An identifier to carry on the result

        Returns:
            The projected coordinate, carrying its transform and the original coordinate

        Raises:
            OutOfRangeError: If latitude or longitude is outside its valid domain
            UnsupportedZoneError: If the zone transform cannot be built
        """
        coordinate.check_range()
        if transform is None:
            transform = self.transform_for(self.zone_id_for(coordinate))

        x, y = transform.forward(coordinate.lat, coordinate.lon)

        return ProjectedCoordinate(
            x=x,
            y=y,
            transform=transform,
            origin=coordinate,
            coordinate_id=coordinate_id,
        )

    def unproject(
        self, transform: ZoneTransform, xy: Tuple[float, float]
    ) -> GeographicCoordinate:
        """
        Map planar (x, y) meters back to a geographic coordinate.

        Args:
            transform: The zone transform the point was projected with
            xy: The (x, y) pair in meters

        Returns:
            The geographic coordinate, in (lat, lon) order
        """
        x, y = xy
        lat, lon = transform.inverse(x, y)
        return GeographicCoordinate(lat, lon)

    def unproject_coordinate(self, projected: ProjectedCoordinate) -> GeographicCoordinate:
        return self.unproject(projected.transform, (projected.x, projected.y))

    def point_geometry(self, coordinate: GeographicCoordinate, coordinate_id: Any = None) -> Point:
        """
        Project a single coordinate into its own zone and return it as a shapely Point.

        Raises:
            OutOfRangeError: If latitude or longitude is outside its valid domain
            InvalidPointError: If the projected ordinates are not finite
        """
        projected = self.project(coordinate, coordinate_id=coordinate_id)
        if not projected.is_finite:
            raise InvalidPointError(
                coordinate_id, None, f"{coordinate} projected to ({projected.x}, {projected.y})"
            )
        return projected.geom
