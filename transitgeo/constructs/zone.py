from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, NamedTuple, Tuple

from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError

from transitgeo.exceptions import UnsupportedZoneError
from transitgeo.utils.crs import (
    LATLON_CRS,
    UTM_NORTH_BASE_CODE,
    UTM_SOUTH_OFFSET,
)

log = logging.getLogger(__name__)

CrsRegistry = Callable[[int], CRS]


class ZoneId(NamedTuple):
    """
    Identifies one WGS84 UTM zone: a 6 degree longitude band in one hemisphere.

    Attributes:
        number: The longitude zone number (1 to 60)
        south: True for the southern hemisphere zone, False for the northern one

    Examples:
        >>> ZoneId(18, south=False).code
        32618
    """

    number: int
    south: bool = False

    @property
    def code(self) -> int:
        """The EPSG code of the zone (326xx north, 327xx south)."""
        offset = UTM_SOUTH_OFFSET if self.south else 0
        return UTM_NORTH_BASE_CODE + offset + self.number

    @property
    def hemisphere(self) -> str:
        return "S" if self.south else "N"

    @property
    def crs_string(self) -> str:
        return f"EPSG:{self.code}"

    def to_string(self) -> str:
        return f"{self.number}{self.hemisphere}"


class ZoneTransform:
    """
    The forward and inverse mapping between WGS84 and the planar frame of one UTM zone.

    Building a transform means resolving two CRS definitions and deriving a pyproj
    pipeline between them, so instances are meant to be built once per zone and reused
    (see `TransformCache`).

    The underlying transformers are created with `always_xy=True` and so take and return
    (longitude, latitude) and (easting, northing). `forward` and `inverse` are the only
    places in transitgeo where the (lat, lon) order used everywhere else is swapped into
    that library order and back.

    Args:
        zone_id: The zone this transform projects into
        zone_crs: The resolved CRS of the zone
        geographic_crs: The resolved geographic CRS, WGS84 by default

    Attributes:
        zone_id: The zone this transform projects into
        crs: The pyproj CRS of the zone
        forward_transformer: pyproj Transformer, geographic (lon, lat) -> planar (x, y)
        inverse_transformer: pyproj Transformer, planar (x, y) -> geographic (lon, lat)
    """

    def __init__(self, zone_id: ZoneId, zone_crs: CRS, geographic_crs: CRS = LATLON_CRS):
        self.zone_id = zone_id
        self.crs = zone_crs
        self.geographic_crs = geographic_crs
        self.forward_transformer = Transformer.from_crs(
            geographic_crs, zone_crs, always_xy=True
        )
        self.inverse_transformer = Transformer.from_crs(
            zone_crs, geographic_crs, always_xy=True
        )

    def __repr__(self):
        return f"ZoneTransform(zone={self.zone_id.to_string()}, crs={self.zone_id.crs_string})"

    @classmethod
    def build(cls, zone_id: ZoneId, registry: CrsRegistry = CRS.from_epsg) -> ZoneTransform:
        """
        Resolve the geographic and zone reference frames and derive the transform.

        Args:
            zone_id: The zone to build a transform for
            registry: A callable resolving an EPSG code into a pyproj CRS. Defaults to
                pyproj's EPSG database via `CRS.from_epsg`. A missing definition may be
                signalled with a pyproj `CRSError` or any `LookupError` such as `KeyError`.

        Returns:
            A new ZoneTransform

        Raises:
            UnsupportedZoneError: If the registry cannot resolve either frame, or resolves
                the zone code to something other than the requested UTM zone
        """
        try:
            geographic_crs = registry(LATLON_CRS.to_epsg())
            zone_crs = registry(zone_id.code)
        except (ProjError, LookupError) as e:
            raise UnsupportedZoneError(zone_id.code, str(e)) from e

        if zone_crs.utm_zone != zone_id.to_string():
            raise UnsupportedZoneError(
                zone_id.code,
                f"registry resolved {zone_crs.name!r} which is not UTM zone {zone_id.to_string()}",
            )

        log.debug("built transform for UTM zone %s", zone_id.to_string())
        return cls(zone_id, zone_crs, geographic_crs)

    def forward(self, lat: float, lon: float) -> Tuple[float, float]:
        """Project (lat, lon) degrees to (x, y) meters."""
        x, y = self.forward_transformer.transform(lon, lat)
        return x, y

    def inverse(self, x: float, y: float) -> Tuple[float, float]:
        """Map (x, y) meters back to (lat, lon) degrees."""
        lon, lat = self.inverse_transformer.transform(x, y)
        return lat, lon


class TransformCache:
    """
    A session-scoped store of zone transforms, owned by whoever runs the session.

    Each zone is built at most once, under a lock, and is shared read-only afterwards,
    so one cache may serve several worker threads validating shapes in parallel.
    A build that raises leaves nothing behind, which keeps a retried call idempotent.

    Examples:
        >>> cache = TransformCache()
        >>> projector = CoordinateProjector(cache)
        >>> # ... project a whole feed ...
        >>> print(cache.zones)
        [ZoneId(number=18, south=False)]
    """

    def __init__(self):
        self._transforms: Dict[ZoneId, ZoneTransform] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._transforms)

    def __contains__(self, zone_id: ZoneId) -> bool:
        return zone_id in self._transforms

    @property
    def zones(self) -> List[ZoneId]:
        return list(self._transforms)

    def get_or_build(
        self, zone_id: ZoneId, build: Callable[[ZoneId], ZoneTransform]
    ) -> ZoneTransform:
        transform = self._transforms.get(zone_id)
        if transform is not None:
            return transform

        with self._lock:
            transform = self._transforms.get(zone_id)
            if transform is None:
                transform = build(zone_id)
                self._transforms[zone_id] = transform

        return transform

    def clear(self):
        with self._lock:
            self._transforms.clear()
