"""
# Shape Length Example

An example of projecting the shapes of a GTFS feed into UTM and measuring their lengths
"""


def main():
    """
    First, we load the shape points.
    transitgeo does not read feeds itself; any GTFS reader will do, and `shapes.txt` is plain csv:
    """

    import pandas as pd

    frame = pd.read_csv("feed/shapes.txt")
    frame.head()

    """
    Every row is one point of one shape, in WGS84 (EPSG:4326) degrees.
    transitgeo uses the dataframe index as the point id, so that a failure can name the exact row that caused it.

    Next we build a projector and an assembler that share one transform cache.
    The cache lives as long as this validation run; nothing is kept between runs.
    """

    from transitgeo.constructs.zone import TransformCache
    from transitgeo.projection.assembler import ShapeGeometryAssembler
    from transitgeo.projection.projector import CoordinateProjector

    cache = TransformCache()
    assembler = ShapeGeometryAssembler(CoordinateProjector(cache))

    """
    Now we assemble one projected line per shape.
    Each shape is projected into the UTM zone of its first point, even where it wanders across a zone edge,
    so every length below is measured in a single planar frame.
    """

    from transitgeo.exceptions import TransitGeoError

    lines = {}
    failures = {}
    for shape_id, group in frame.groupby("shape_id", sort=False):
        try:
            lines[shape_id] = assembler.build_lines_from_dataframe(group)[shape_id]
        except TransitGeoError as e:
            failures[shape_id] = str(e)

    """
    Shapes that could not be built are reported rather than silently dropped.
    Finally, we summarize the lines as a GeoDataFrame that can be written straight to disk:
    """

    from transitgeo.projection.assembler import lines_to_geodataframe

    gdf = lines_to_geodataframe(lines.values())
    print(gdf[["shape_id", "zone_code", "num_points", "length_meters"]])
    print(f"{len(failures)} shapes failed; zones used: {[z.code for z in cache.zones]}")

    gdf.to_file("shapes.geojson", driver="GeoJSON")


if __name__ == "__main__":
    main()
