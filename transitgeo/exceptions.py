from typing import Any, Optional


class TransitGeoError(ValueError):
    """Base class for every projection or geometry failure raised by transitgeo."""


class OutOfRangeError(TransitGeoError):
    """A latitude or longitude lies outside its valid domain."""


class UnsupportedZoneError(TransitGeoError):
    """The CRS registry could not resolve the reference frame for a zone."""

    def __init__(self, zone_id: Any, reason: str = ""):
        self.zone_id = zone_id
        message = f"no usable CRS definition for zone {zone_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidPointError(TransitGeoError):
    """
    A shape point could not be converted to a finite projected coordinate.

    Attributes:
        point_id: The identifier of the offending point
        shape_id: The identifier of the shape the point belongs to
    """

    def __init__(self, point_id: Any, shape_id: Any, reason: str = ""):
        self.point_id = point_id
        self.shape_id = shape_id
        message = f"Something is wrong with {point_id} on shape {shape_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InsufficientPointsError(TransitGeoError):
    """Fewer points were supplied than the requested geometry needs."""

    def __init__(self, shape_id: Optional[Any], num_points: int, required: int = 2):
        self.shape_id = shape_id
        self.num_points = num_points
        self.required = required
        super().__init__(
            f"shape {shape_id} has {num_points} point(s); "
            f"at least {required} are needed to build a line"
        )
