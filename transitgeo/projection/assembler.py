from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict, Iterable, List, Optional

import geopandas as gpd
import pandas as pd

from transitgeo.constructs.coordinate import ProjectedCoordinate
from transitgeo.constructs.shape import ProjectedLineGeometry, ShapePoint
from transitgeo.exceptions import (
    InsufficientPointsError,
    InvalidPointError,
    OutOfRangeError,
)
from transitgeo.projection.projector import CoordinateProjector
from transitgeo.utils.crs import LATLON_CRS

log = logging.getLogger(__name__)

MIN_LINE_POINTS = 2


class ShapeGeometryAssembler:
    """
    Stitches the points of a GTFS shape into one projected line.

    Points are ordered by sequence with a stable sort, so points sharing a sequence
    value all survive, in the order they were supplied. The whole shape is projected
    through the zone of its first point; a shape that crosses a zone edge therefore
    stays in one planar frame and its length remains meaningful.

    A shape with fewer than two points is rejected with InsufficientPointsError rather
    than returned as a single-vertex line.

    Args:
        projector: The projector to use. A fresh one, with its own transform cache,
            is created when omitted.

    Examples:
        >>> from transitgeo.constructs.shape import ShapePoint
        >>> from transitgeo.projection.assembler import ShapeGeometryAssembler
        >>>
        >>> points = [
        ...     ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
        ...     ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
        ... ]
        >>> line = ShapeGeometryAssembler().build_line(points)
        >>> line.point_ids
        ['p1', 'p2']
    """

    def __init__(self, projector: Optional[CoordinateProjector] = None):
        self.projector = projector if projector is not None else CoordinateProjector()

    def build_line(self, points: Iterable[ShapePoint]) -> ProjectedLineGeometry:
        """
        Build a projected line from the points of one shape.

        Args:
            points: The shape's points, in any order

        Returns:
            The projected line, one vertex per input point, ordered by sequence

        Raises:
            InsufficientPointsError: If fewer than two points are supplied
            InvalidPointError: If any point has a missing or NaN sequence, lies outside the
                valid lat/lon ranges, or projects to a non-finite ordinate. No partial
                line is produced.
            UnsupportedZoneError: If the reference zone's transform cannot be built
        """
        points = list(points)
        for point in points:
            if not isinstance(point.sequence, numbers.Real) or math.isnan(point.sequence):
                raise InvalidPointError(
                    point.point_id, point.shape_id, f"sequence {point.sequence!r} cannot be ordered"
                )

        ordered = sorted(points, key=lambda p: p.sequence)
        shape_id = ordered[0].shape_id if ordered else None
        if len(ordered) < MIN_LINE_POINTS:
            raise InsufficientPointsError(shape_id, len(ordered), MIN_LINE_POINTS)

        reference = ordered[0]
        try:
            zone_id = self.projector.zone_id_for(reference.coordinate)
        except OutOfRangeError as e:
            raise InvalidPointError(reference.point_id, reference.shape_id, str(e)) from e
        transform = self.projector.transform_for(zone_id)

        coords: List[ProjectedCoordinate] = []
        for point in ordered:
            try:
                projected = self.projector.project(
                    point.coordinate, transform, coordinate_id=point.point_id
                )
            except OutOfRangeError as e:
                raise InvalidPointError(point.point_id, point.shape_id, str(e)) from e

            if not projected.is_finite:
                raise InvalidPointError(
                    point.point_id,
                    point.shape_id,
                    f"projected to ({projected.x}, {projected.y})",
                )
            coords.append(projected)

        log.debug(
            "assembled shape %s from %d points in zone %s",
            shape_id,
            len(coords),
            zone_id.to_string(),
        )
        return ProjectedLineGeometry(coords, transform, shape_id)

    def build_lines(self, points: Iterable[ShapePoint]) -> Dict[Any, ProjectedLineGeometry]:
        """
        Build one line per shape from a feed's worth of shape points.

        Points are grouped by shape id; shapes come out in the order their first point
        appears. Each shape picks its own zone. The first failing shape aborts the call;
        callers that want to record failures per shape should call `build_line` on each
        group themselves.

        Args:
            points: Shape points from any number of shapes, in any order

        Returns:
            A dictionary mapping shape id to its projected line
        """
        grouped: Dict[Any, List[ShapePoint]] = {}
        for point in points:
            grouped.setdefault(point.shape_id, []).append(point)

        return {shape_id: self.build_line(group) for shape_id, group in grouped.items()}

    def build_lines_from_dataframe(
        self, frame: pd.DataFrame, **columns: str
    ) -> Dict[Any, ProjectedLineGeometry]:
        """
        Build one line per shape from a DataFrame laid out like GTFS `shapes.txt`.

        Args:
            frame: The shape points, one row each; the index is used as point id
            **columns: Column name overrides passed on to `ShapePoint.from_dataframe`

        Returns:
            A dictionary mapping shape id to its projected line
        """
        return self.build_lines(ShapePoint.from_dataframe(frame, **columns))


def lines_to_geodataframe(lines: Iterable[ProjectedLineGeometry]) -> gpd.GeoDataFrame:
    """
    Summarize projected lines as a GeoDataFrame in WGS84.

    Lengths are measured in each line's own zone before the geometry is mapped back to
    EPSG:4326, so rows from different zones can sit in one frame without being mixed.

    Args:
        lines: The lines to summarize

    Returns:
        A GeoDataFrame with columns:
        - shape_id: The shape identifier
        - zone_code: The EPSG code of the zone the line was measured in
        - num_points: The number of vertices
        - length_meters: The planar length in meters
        - geometry: The line in EPSG:4326

    Examples:
        >>> lines = assembler.build_lines(points)
        >>> gdf = lines_to_geodataframe(lines.values())
        >>> gdf.to_file('shapes.geojson', driver='GeoJSON')
    """
    rows = [
        {
            "shape_id": line.shape_id,
            "zone_code": line.zone_id.code,
            "num_points": len(line),
            "length_meters": line.length,
            "geometry": line.to_lat_lon_geom(),
        }
        for line in lines
    ]
    df = pd.DataFrame(
        rows, columns=["shape_id", "zone_code", "num_points", "length_meters", "geometry"]
    )
    return gpd.GeoDataFrame(df, geometry="geometry", crs=LATLON_CRS)
