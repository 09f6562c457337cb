from unittest import TestCase

from transitgeo.constructs.coordinate import GeographicCoordinate
from transitgeo.projection.projector import CoordinateProjector
from transitgeo.utils.geo import coord_to_coord_dist, meters_to_degrees


class TestGeoUtils(TestCase):
    def test_meters_to_degrees(self):
        self.assertAlmostEqual(meters_to_degrees(111319.4908), 1.0, places=6)
        self.assertEqual(meters_to_degrees(0.0), 0.0)

    def test_meters_to_degrees_matches_projected_latitude_span(self):
        """On a central meridian a projected northing span maps back to about as many degrees"""
        projector = CoordinateProjector()
        a = projector.project(GeographicCoordinate(0.0, -75.0))
        b = projector.project(GeographicCoordinate(0.1, -75.0), a.transform)

        dist = coord_to_coord_dist(a, b)

        self.assertAlmostEqual(meters_to_degrees(dist), 0.1, delta=0.002)

    def test_coord_to_coord_dist(self):
        projector = CoordinateProjector()
        a = projector.project(GeographicCoordinate(40.7128, -74.0060))
        b = projector.project(GeographicCoordinate(40.7589, -73.9851))

        dist = coord_to_coord_dist(a, b)

        # lower Manhattan to Times Square is a little over 5 km
        self.assertGreater(dist, 5200)
        self.assertLess(dist, 5700)
