import math

from transitgeo.constructs.coordinate import ProjectedCoordinate
from transitgeo.utils.crs import EARTH_RADIUS_METERS


def meters_to_degrees(distance: float) -> float:
    """
    Convert a distance in meters into the equivalent angle in degrees.

    The angle is measured along a great circle of the WGS84 equatorial radius, so it
    is exact for latitude spans and for longitude spans on the equator only.

    Args:
        distance: The distance in meters

    Returns:
        The angle in decimal degrees subtended by that distance

    Examples:
        >>> round(meters_to_degrees(111319.49), 6)
        1.0
    """
    return distance / (math.pi / 180) / EARTH_RADIUS_METERS


def coord_to_coord_dist(a: ProjectedCoordinate, b: ProjectedCoordinate) -> float:
    """
    Calculate the Euclidean distance between two projected coordinates.

    Args:
        a: The first coordinate
        b: The second coordinate. Must come from the same zone as coordinate a.

    Returns:
        The distance in meters

    Raises:
        TypeError: If the coordinates were projected into different zones
    """
    if a.transform.zone_id != b.transform.zone_id:
        raise TypeError(
            f"cannot measure between zone {a.transform.zone_id.code} and "
            f"zone {b.transform.zone_id.code}; project both with one transform"
        )

    dist = a.geom.distance(b.geom)

    return dist
