import math
from unittest import TestCase
from unittest.mock import patch

import pandas as pd

from transitgeo.constructs.coordinate import GeographicCoordinate
from transitgeo.constructs.shape import ProjectedLineGeometry, ShapePoint
from transitgeo.constructs.zone import ZoneId, ZoneTransform
from transitgeo.exceptions import InsufficientPointsError, InvalidPointError
from transitgeo.projection.assembler import (
    ShapeGeometryAssembler,
    lines_to_geodataframe,
)
from transitgeo.projection.projector import CoordinateProjector
from transitgeo.utils.geo import coord_to_coord_dist
from tests import get_test_dir


class TestBuildLine(TestCase):
    def setUp(self):
        self.assembler = ShapeGeometryAssembler()

    def test_points_are_ordered_by_sequence(self):
        points = [
            ShapePoint("p3", "s1", 40.7614, -73.9776, 3),
            ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
            ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
        ]

        line = self.assembler.build_line(points)

        self.assertEqual(line.point_ids, ["p1", "p2", "p3"])
        self.assertEqual(line.shape_id, "s1")
        self.assertEqual(line.zone_id.code, 32618)
        self.assertEqual(len(line.geom.coords), 3)

    def test_duplicate_sequence_positions_are_kept_in_input_order(self):
        points = [
            ShapePoint("b", "s1", 40.7589, -73.9851, 2),
            ShapePoint("a", "s1", 40.7128, -74.0060, 1),
            ShapePoint("c", "s1", 40.7614, -73.9776, 2),
            ShapePoint("d", "s1", 40.7614, -73.9776, 2),
        ]

        line = self.assembler.build_line(points)

        self.assertEqual(len(line), 4)
        self.assertEqual(line.point_ids, ["a", "b", "c", "d"])
        self.assertEqual(line[2].x, line[3].x)

    def test_one_transform_across_a_zone_edge(self):
        """A shape crossing -72 degrees stays in the zone of its first point"""
        lons = [-72.03, -72.01, -71.99, -71.97]
        points = [
            ShapePoint(f"p{i}", "s1", 42.0, lon, i) for i, lon in enumerate(lons)
        ]

        line = self.assembler.build_line(points)

        self.assertTrue(all(c.transform is line.transform for c in line))
        self.assertTrue(all(c.transform.zone_id == ZoneId(18) for c in line))

        gaps = [coord_to_coord_dist(a, b) for a, b in zip(line[:-1], line[1:])]
        for gap in gaps:
            self.assertGreater(gap, 1600)
            self.assertLess(gap, 1710)
        self.assertLess(max(gaps) - min(gaps), 0.01 * min(gaps))
        self.assertAlmostEqual(line.length, sum(gaps), places=6)

        # the same point in its own zone sits hundreds of kilometers away
        own_zone = self.assembler.projector.project(GeographicCoordinate(42.0, -71.99))
        self.assertEqual(own_zone.transform.zone_id, ZoneId(19))
        self.assertGreater(abs(own_zone.x - line[2].x), 100000)

    def test_round_trip_through_line(self):
        points = [
            ShapePoint("p1", "s1", -33.8688, 151.2093, 1),
            ShapePoint("p2", "s1", -33.8700, 151.2100, 2),
        ]

        line = self.assembler.build_line(points)

        for point, back in zip(points, line.to_lat_lon()):
            self.assertAlmostEqual(back.lat, point.lat, delta=1e-6)
            self.assertAlmostEqual(back.lon, point.lon, delta=1e-6)
        self.assertEqual(line.zone_id.code, 32756)

    def test_no_points(self):
        with self.assertRaises(InsufficientPointsError) as ctx:
            self.assembler.build_line([])

        self.assertEqual(ctx.exception.num_points, 0)
        self.assertIsNone(ctx.exception.shape_id)

    def test_single_point(self):
        with self.assertRaises(InsufficientPointsError) as ctx:
            self.assembler.build_line([ShapePoint("p1", "s1", 40.7128, -74.0060, 1)])

        self.assertEqual(ctx.exception.num_points, 1)
        self.assertEqual(ctx.exception.shape_id, "s1")

    def test_out_of_range_point(self):
        points = [
            ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
            ShapePoint("p2", "s1", 40.7589, 200.0, 2),
            ShapePoint("p3", "s1", 40.7614, -73.9776, 3),
        ]

        with self.assertRaises(InvalidPointError) as ctx:
            self.assembler.build_line(points)

        self.assertEqual(ctx.exception.point_id, "p2")
        self.assertEqual(ctx.exception.shape_id, "s1")
        self.assertIn("p2", str(ctx.exception))

    def test_out_of_range_reference_point(self):
        points = [
            ShapePoint("p1", "s1", 40.7128, -190.0, 1),
            ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
        ]

        with self.assertRaises(InvalidPointError) as ctx:
            self.assembler.build_line(points)

        self.assertEqual(ctx.exception.point_id, "p1")

    def test_nan_latitude(self):
        points = [
            ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
            ShapePoint("p2", "s1", float("nan"), -73.9851, 2),
        ]

        with self.assertRaises(InvalidPointError) as ctx:
            self.assembler.build_line(points)

        self.assertEqual(ctx.exception.point_id, "p2")

    def test_missing_latitude(self):
        points = [
            ShapePoint("p1", "s1", 40.0, -74.0, 1),
            ShapePoint("p2", "s1", None, -74.0, 2),
        ]

        with self.assertRaises(InvalidPointError) as ctx:
            self.assembler.build_line(points)

        self.assertEqual(ctx.exception.point_id, "p2")
        self.assertEqual(ctx.exception.shape_id, "s1")

    def test_missing_coordinates_on_reference_point(self):
        for lat, lon in [(None, -74.0), (40.0, None), ("40.0", -74.0)]:
            with self.subTest(lat=lat, lon=lon):
                points = [
                    ShapePoint("p1", "s1", lat, lon, 1),
                    ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
                ]

                with self.assertRaises(InvalidPointError) as ctx:
                    self.assembler.build_line(points)

                self.assertEqual(ctx.exception.point_id, "p1")

    def test_unorderable_sequence(self):
        for sequence in [float("nan"), None]:
            with self.subTest(sequence=sequence):
                points = [
                    ShapePoint("p3", "s1", 40.7614, -73.9776, 3),
                    ShapePoint("px", "s1", 40.7500, -73.9900, sequence),
                    ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
                    ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
                ]

                with self.assertRaises(InvalidPointError) as ctx:
                    self.assembler.build_line(points)

                self.assertEqual(ctx.exception.point_id, "px")
                self.assertEqual(ctx.exception.shape_id, "s1")

    def test_non_finite_projection(self):
        points = [
            ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
            ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
            ShapePoint("p3", "s1", 40.7614, -73.9776, 3),
        ]
        outputs = [(583000.0, 4507000.0), (math.inf, 4510000.0), (586000.0, 4512000.0)]

        with patch.object(ZoneTransform, "forward", side_effect=outputs):
            with self.assertRaises(InvalidPointError) as ctx:
                self.assembler.build_line(points)

        self.assertEqual(ctx.exception.point_id, "p2")
        self.assertEqual(ctx.exception.shape_id, "s1")

    def test_assembler_uses_its_projector_session(self):
        projector = CoordinateProjector()
        assembler = ShapeGeometryAssembler(projector)
        points = [
            ShapePoint("p1", "s1", 40.7128, -74.0060, 1),
            ShapePoint("p2", "s1", 40.7589, -73.9851, 2),
        ]

        line = assembler.build_line(points)

        self.assertIs(line.transform, projector.transform_for(ZoneId(18)))


class TestProjectedLineGeometry(TestCase):
    def test_mixed_zones_are_rejected(self):
        projector = CoordinateProjector()
        a = projector.project(GeographicCoordinate(42.0, -72.5))
        b = projector.project(GeographicCoordinate(42.0, -71.5))

        with self.assertRaises(TypeError):
            ProjectedLineGeometry([a, b], a.transform, "s1")
        with self.assertRaises(TypeError):
            coord_to_coord_dist(a, b)

    def test_bounds(self):
        projector = CoordinateProjector()
        transform = projector.transform_for(ZoneId(18))
        a = projector.project(GeographicCoordinate(0.0, -75.0), transform)
        b = projector.project(GeographicCoordinate(0.01, -75.0), transform)

        line = ProjectedLineGeometry([a, b], transform, "s1")
        minx, miny, maxx, maxy = line.bounds

        self.assertAlmostEqual(minx, 500000.0, places=3)
        self.assertAlmostEqual(maxx, 500000.0, places=3)
        self.assertAlmostEqual(miny, 0.0, places=3)
        self.assertAlmostEqual(maxy - miny, line.length, places=6)


class TestBuildLines(TestCase):
    def setUp(self):
        self.assembler = ShapeGeometryAssembler()
        self.frame = pd.read_csv(get_test_dir() / "test_assets" / "shapes.txt")

    def test_shape_points_from_dataframe(self):
        points = ShapePoint.from_dataframe(self.frame)

        self.assertEqual(len(points), 6)
        self.assertEqual(points[0].point_id, 0)
        self.assertEqual(points[0].shape_id, "A")
        self.assertEqual(points[0].dist_traveled, 0.0)
        self.assertIsNone(points[1].dist_traveled)
        self.assertEqual(points[3].sequence, 10.0)

    def test_missing_columns(self):
        with self.assertRaises(ValueError):
            ShapePoint.from_dataframe(self.frame.drop(columns=["shape_pt_lat"]))

    def test_blank_sequence_in_dataframe(self):
        frame = self.frame.copy()
        frame["shape_pt_sequence"] = frame["shape_pt_sequence"].astype(float)
        frame.loc[4, "shape_pt_sequence"] = float("nan")

        with self.assertRaises(ValueError) as ctx:
            ShapePoint.from_dataframe(frame)

        self.assertIn("[4]", str(ctx.exception))

    def test_build_lines_from_dataframe(self):
        lines = self.assembler.build_lines_from_dataframe(self.frame)

        self.assertEqual(list(lines), ["A", "B"])
        self.assertEqual(lines["A"].zone_id.code, 32610)
        self.assertEqual(lines["B"].zone_id.code, 32756)
        self.assertEqual(len(lines["A"]), 3)
        self.assertEqual(lines["B"].point_ids, [3, 4, 5])

    def test_build_lines_propagates_failures(self):
        points = ShapePoint.from_dataframe(self.frame)
        points.append(ShapePoint("lonely", "C", 10.0, 10.0, 1))

        with self.assertRaises(InsufficientPointsError) as ctx:
            self.assembler.build_lines(points)

        self.assertEqual(ctx.exception.shape_id, "C")

    def test_lines_to_geodataframe(self):
        lines = self.assembler.build_lines_from_dataframe(self.frame)

        gdf = lines_to_geodataframe(lines.values())

        self.assertEqual(len(gdf), 2)
        self.assertEqual(gdf.crs.to_epsg(), 4326)
        self.assertEqual(list(gdf["zone_code"]), [32610, 32756])
        self.assertEqual(list(gdf["num_points"]), [3, 3])
        self.assertTrue((gdf["length_meters"] > 0).all())
        first = gdf.geometry.iloc[0].coords[0]
        self.assertAlmostEqual(first[0], -122.6765, delta=1e-6)
        self.assertAlmostEqual(first[1], 45.5231, delta=1e-6)
