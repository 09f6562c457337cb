from __future__ import annotations

from typing import Any, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd
from shapely.geometry import LineString

from transitgeo.constructs.coordinate import GeographicCoordinate, ProjectedCoordinate
from transitgeo.constructs.zone import ZoneTransform
from transitgeo.utils.keys import (
    SHAPE_DIST_TRAVELED_KEY,
    SHAPE_ID_KEY,
    SHAPE_LAT_KEY,
    SHAPE_LON_KEY,
    SHAPE_SEQUENCE_KEY,
)


class ShapePoint(NamedTuple):
    """
    One point of a GTFS shape, as supplied by the feed reader.

    Attributes:
        point_id: The identifier of this point
        shape_id: The identifier of the shape the point belongs to
        lat: The latitude in decimal degrees
        lon: The longitude in decimal degrees
        sequence: The position of the point along the shape; points are ordered by it
        dist_traveled: Optional distance traveled from the first point of the shape,
            in whatever units the feed uses
    """

    point_id: Any
    shape_id: Any
    lat: float
    lon: float
    sequence: float
    dist_traveled: Optional[float] = None

    @property
    def coordinate(self) -> GeographicCoordinate:
        return GeographicCoordinate(self.lat, self.lon)

    @classmethod
    def from_dataframe(
        cls,
        frame: pd.DataFrame,
        shape_id_column: str = SHAPE_ID_KEY,
        lat_column: str = SHAPE_LAT_KEY,
        lon_column: str = SHAPE_LON_KEY,
        sequence_column: str = SHAPE_SEQUENCE_KEY,
        dist_traveled_column: str = SHAPE_DIST_TRAVELED_KEY,
    ) -> List[ShapePoint]:
        """
        Create shape points from a pandas DataFrame laid out like GTFS `shapes.txt`.

        The DataFrame index is used as the point id. The distance traveled column is
        optional; missing values become None.

        Args:
            frame: A DataFrame with one row per shape point
            shape_id_column: The name of the shape id column. Default is "shape_id".
            lat_column: The name of the latitude column. Default is "shape_pt_lat".
            lon_column: The name of the longitude column. Default is "shape_pt_lon".
            sequence_column: The name of the sequence column. Default is "shape_pt_sequence".
            dist_traveled_column: The name of the distance traveled column. Default is "shape_dist_traveled".

        Returns:
            A list of ShapePoint objects in frame order

        Raises:
            ValueError: If any of the required columns is missing, or a sequence value is blank

        Examples:
            >>> import pandas as pd
            >>> frame = pd.read_csv('feed/shapes.txt')
            >>> points = ShapePoint.from_dataframe(frame)
        """
        required = [shape_id_column, lat_column, lon_column, sequence_column]
        missing = [c for c in required if c not in frame.columns]
        if missing:
            raise ValueError(f"could not find shape columns {missing} in the frame")

        lats = frame[lat_column].to_numpy(dtype=float)
        lons = frame[lon_column].to_numpy(dtype=float)
        sequences = frame[sequence_column].to_numpy(dtype=float)
        missing_sequence = np.isnan(sequences)
        if missing_sequence.any():
            raise ValueError(
                f"rows {list(frame.index[missing_sequence])} have no {sequence_column} value"
            )
        if dist_traveled_column in frame.columns:
            dists = frame[dist_traveled_column].to_numpy(dtype=float)
        else:
            dists = np.full(len(frame), np.nan)

        return [
            cls(
                point_id=point_id,
                shape_id=shape_id,
                lat=float(lat),
                lon=float(lon),
                sequence=float(sequence),
                dist_traveled=None if np.isnan(dist) else float(dist),
            )
            for point_id, shape_id, lat, lon, sequence, dist in zip(
                frame.index, frame[shape_id_column], lats, lons, sequences, dists
            )
        ]


class ProjectedLineGeometry:
    """
    An ordered path of projected coordinates, all drawn from a single zone transform.

    Because every vertex shares one planar frame, lengths and extents computed from the
    line are directly comparable within it. The line is built by
    `ShapeGeometryAssembler.build_line` and is usually handed on to whatever computes
    feed statistics.

    Args:
        coords: The vertices of the line, in path order
        transform: The zone transform every vertex was projected with
        shape_id: The identifier of the shape this line represents

    Raises:
        TypeError: If any vertex was projected with a different transform

    Examples:
        >>> line = assembler.build_line(points)
        >>> print(f"{line.shape_id}: {line.length:.1f} m in zone {line.zone_id.code}")
    """

    def __init__(
        self,
        coords: List[ProjectedCoordinate],
        transform: ZoneTransform,
        shape_id: Any = None,
    ):
        for c in coords:
            if c.transform is not transform:
                raise TypeError(
                    f"coordinate {c.coordinate_id} was projected in zone "
                    f"{c.transform.zone_id.code}, not {transform.zone_id.code}; "
                    "cannot mix zones in one line"
                )
        self._coords = list(coords)
        self.transform = transform
        self.shape_id = shape_id

    def __len__(self):
        """Number of vertices."""
        return len(self._coords)

    def __iter__(self) -> Iterator[ProjectedCoordinate]:
        return iter(self._coords)

    def __getitem__(self, i) -> ProjectedCoordinate:
        return self._coords[i]

    def __repr__(self):
        return (
            f"ProjectedLineGeometry(shape_id={self.shape_id}, "
            f"zone={self.zone_id.code}, num_points={len(self)})"
        )

    @property
    def coords(self) -> List[ProjectedCoordinate]:
        return list(self._coords)

    @property
    def zone_id(self):
        return self.transform.zone_id

    @property
    def crs(self):
        return self.transform.crs

    @property
    def point_ids(self) -> List[Any]:
        return [c.coordinate_id for c in self._coords]

    @property
    def geom(self) -> LineString:
        """The line as a shapely LineString in the zone's planar frame."""
        return LineString([(c.x, c.y) for c in self._coords])

    @property
    def length(self) -> float:
        """Length of the path in meters."""
        return self.geom.length

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Planar extent as (minx, miny, maxx, maxy) in meters."""
        return self.geom.bounds

    def to_lat_lon(self) -> List[GeographicCoordinate]:
        """Map every vertex back to WGS84 through the line's inverse transform."""
        return [c.to_geographic() for c in self._coords]

    def to_lat_lon_geom(self) -> LineString:
        """The line as a shapely LineString in EPSG:4326, with (lon, lat) vertices."""
        return LineString([c.geom for c in self.to_lat_lon()])
