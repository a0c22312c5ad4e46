"""Unit tests for ShapeContainer.

Covers construction from GeoJSON and points, bounding caps, centroids, the
containment and intersection predicates, and GeoJSON persistence.
"""

import math

import pytest
from shapely.geometry import LineString, Point, Polygon

from modules.geo_query.constants import EARTH_RADIUS_METERS
from modules.geo_query.geometry import LatLng, ShapeContainer, ShapeType
from src.exceptions import GeoPreconditionError, GeoValidationError


SQUARE_GEOJSON = {
    "type": "Polygon",
    "coordinates": [[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]],
}


@pytest.fixture
def square():
    return ShapeContainer.from_geojson(SQUARE_GEOJSON)


class TestShapeConstruction:
    """Test building shapes."""

    def test_empty(self):
        """Test the empty shape."""
        shape = ShapeContainer.empty()

        assert shape.is_empty()
        assert shape.shape_type == ShapeType.EMPTY
        assert not shape.is_area_type()
        assert shape == ShapeContainer()

    @pytest.mark.parametrize(
        "doc, expected",
        [
            pytest.param({"type": "Point", "coordinates": [1.0, 2.0]}, ShapeType.POINT, id="point"),
            pytest.param({"type": "LineString", "coordinates": [[0, 0], [1, 1]]}, ShapeType.POLYLINE, id="polyline"),
            pytest.param(SQUARE_GEOJSON, ShapeType.POLYGON, id="polygon"),
            pytest.param({"type": "MultiPoint", "coordinates": [[0, 0], [1, 1]]}, ShapeType.MULTI_POINT, id="multi point"),
            pytest.param(
                {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3]]]},
                ShapeType.MULTI_POLYLINE,
                id="multi polyline",
            ),
            pytest.param(
                {"type": "MultiPolygon", "coordinates": [SQUARE_GEOJSON["coordinates"]]},
                ShapeType.MULTI_POLYGON,
                id="multi polygon",
            ),
            pytest.param(
                {"type": "Circle", "coordinates": [10.0, 20.0], "radius": 1000.0},
                ShapeType.CIRCLE,
                id="circle",
            ),
        ]
    )
    def test_from_geojson_types(self, doc, expected):
        """Test that each supported GeoJSON type maps to its shape type."""
        assert ShapeContainer.from_geojson(doc).shape_type == expected

    def test_area_types(self, square):
        """Test which shapes have an interior."""
        assert square.is_area_type()
        assert ShapeContainer.circle(LatLng(lat=0.0, lng=0.0), 10.0).is_area_type()
        assert not ShapeContainer.from_point(LatLng(lat=0.0, lng=0.0)).is_area_type()

    @pytest.mark.parametrize(
        "doc",
        [
            pytest.param({"type": "Polygon", "coordinates": []}, id="empty polygon"),
            pytest.param({"type": "Point"}, id="missing coordinates"),
            pytest.param({"type": "Hexagon", "coordinates": [1, 2]}, id="unknown type"),
            pytest.param(
                {"type": "Polygon", "coordinates": [[[0, 0], [2, 2], [2, 0], [0, 2], [0, 0]]]},
                id="self-intersecting polygon",
            ),
            pytest.param({"type": "Point", "coordinates": [200.0, 0.0]}, id="longitude out of range"),
            pytest.param({"type": "Circle", "coordinates": [0.0, 0.0]}, id="circle without radius"),
            pytest.param({"type": "Circle", "coordinates": [0.0, 0.0], "radius": -1.0}, id="negative radius"),
            pytest.param("POINT (1 2)", id="not an object"),
        ]
    )
    def test_from_geojson_rejects(self, doc):
        """Test that unusable documents raise a recoverable error."""
        with pytest.raises(GeoValidationError):
            ShapeContainer.from_geojson(doc)

    def test_from_geometry_rejects_collections(self):
        """Test that geometry collections are not supported."""
        from shapely.geometry import GeometryCollection

        with pytest.raises(GeoPreconditionError):
            ShapeContainer.from_geometry(GeometryCollection([Point(0, 0)]))

    def test_from_point_requires_valid_point(self):
        """Test that the invalid sentinel cannot become a shape."""
        with pytest.raises(GeoPreconditionError):
            ShapeContainer.from_point(LatLng.invalid())

    def test_circle_preconditions(self):
        """Test circle center and radius checks."""
        with pytest.raises(GeoPreconditionError):
            ShapeContainer.circle(LatLng.invalid(), 10.0)
        with pytest.raises(GeoPreconditionError):
            ShapeContainer.circle(LatLng(lat=0.0, lng=0.0), -10.0)

    def test_circle_radius_clamped(self):
        """Test that an oversized circle covers the whole sphere."""
        circle = ShapeContainer.circle(LatLng(lat=0.0, lng=0.0), 1e9)

        assert circle.bounding_cap().is_full()


class TestBoundingCap:
    """Test bounding caps of shapes."""

    def test_square_cap_holds_vertices(self, square):
        """Test that the cap holds every corner and is centered inside."""
        cap = square.bounding_cap()

        for lng, lat in SQUARE_GEOJSON["coordinates"][0]:
            assert cap.contains(LatLng(lat=lat, lng=lng))
        assert square.contains(cap.center)
        # at least half the diagonal, widened by at most one sample spacing
        assert math.radians(math.sqrt(2) / 2) * 0.99 <= cap.radius <= math.radians(2.0)

    def test_point_cap_has_zero_radius(self):
        """Test the degenerate cap of a point."""
        cap = ShapeContainer.from_point(LatLng(lat=3.0, lng=4.0)).bounding_cap()

        assert cap.radius == 0.0
        assert cap.center == LatLng(lat=3.0, lng=4.0)

    def test_circle_cap_is_circle(self):
        """Test that a circle is its own bounding cap."""
        circle = ShapeContainer.circle(LatLng(lat=10.0, lng=20.0), 0.01 * EARTH_RADIUS_METERS)

        assert circle.bounding_cap().radius == pytest.approx(0.01)
        assert circle.bounding_cap().center == LatLng(lat=10.0, lng=20.0)

    def test_long_edge_is_sampled(self):
        """Test that points along a long edge stay inside the cap."""
        line = ShapeContainer.from_geometry(LineString([(-40.0, 10.0), (40.0, 10.0)]))
        cap = line.bounding_cap()

        assert cap.contains(LatLng(lat=10.0, lng=0.0))
        assert cap.contains(LatLng(lat=10.0, lng=39.5))

    def test_polygon_larger_than_hemisphere(self):
        """Test that the cap of a polygon spanning most of the globe holds its interior."""
        band = ShapeContainer.from_geojson({
            "type": "Polygon",
            "coordinates": [[[-179.0, -80.0], [179.0, -80.0], [179.0, 80.0], [-179.0, 80.0], [-179.0, -80.0]]],
        })
        inside = LatLng(lat=0.0, lng=0.0)

        assert band.contains(inside)
        assert band.bounding_cap().contains(inside)
        assert band.bounding_cap().is_full()

    @pytest.mark.parametrize(
        "point",
        [
            pytest.param(LatLng(lat=0.0, lng=0.0), id="centre"),
            pytest.param(LatLng(lat=44.9, lng=-59.9), id="near corner"),
            pytest.param(LatLng(lat=45.0, lng=0.0), id="on edge"),
        ]
    )
    def test_cap_holds_contained_points(self, point):
        """Test that every point a large polygon contains lies in its cap."""
        polygon = ShapeContainer.from_geometry(Polygon([(-60, -45), (60, -45), (60, 45), (-60, 45)]))

        assert polygon.contains(point)
        assert polygon.bounding_cap().contains(point)

    def test_multi_polygon_cap_holds_every_part(self):
        """Test that the cap of a multi polygon holds points of each part."""
        shape = ShapeContainer.from_geojson({
            "type": "MultiPolygon",
            "coordinates": [
                [[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]],
                [[[10.0, 10.0], [11.0, 10.0], [11.0, 11.0], [10.0, 11.0], [10.0, 10.0]]],
            ],
        })
        cap = shape.bounding_cap()

        assert cap.contains(LatLng(lat=0.5, lng=0.5))
        assert cap.contains(LatLng(lat=10.5, lng=10.5))
        assert not cap.is_full()

    def test_empty_shape_has_no_cap(self):
        """Test that asking an empty shape for its cap fails fast."""
        with pytest.raises(GeoPreconditionError):
            ShapeContainer.empty().bounding_cap()


class TestCentroid:
    """Test centroids and centroid distances."""

    def test_polygon_centroid(self, square):
        """Test the centroid of the unit square."""
        centroid = square.centroid()

        assert centroid.lat == pytest.approx(0.5)
        assert centroid.lng == pytest.approx(0.5)

    def test_circle_centroid(self):
        """Test that a circle's centroid is its center."""
        center = LatLng(lat=-30.0, lng=150.0)

        assert ShapeContainer.circle(center, 500.0).centroid() == center

    def test_polyline_centroid(self):
        """Test the centroid of a short polyline."""
        line = ShapeContainer.from_geometry(LineString([(0.0, 0.0), (2.0, 0.0)]))

        assert line.centroid().lng == pytest.approx(1.0)
        assert line.centroid().lat == pytest.approx(0.0, abs=1e-9)

    def test_distance_from_centroid(self, square):
        """Test the distance in meters from the centroid."""
        distance = square.distance_from_centroid(LatLng(lat=0.5, lng=1.5))

        assert distance == pytest.approx(math.radians(1.0) * EARTH_RADIUS_METERS, rel=1e-3)

    def test_empty_shape_has_no_centroid(self):
        """Test that an empty shape has no centroid."""
        with pytest.raises(GeoPreconditionError):
            ShapeContainer.empty().centroid()


class TestPredicates:
    """Test containment and intersection."""

    @pytest.mark.parametrize(
        "lat, lng, expected",
        [
            pytest.param(0.5, 0.5, True, id="interior"),
            pytest.param(0.0, 0.5, True, id="on edge"),
            pytest.param(1.0, 1.0, True, id="on corner"),
            pytest.param(2.0, 2.0, False, id="outside"),
        ]
    )
    def test_polygon_contains_point(self, square, lat, lng, expected):
        """Test point containment including the border."""
        assert square.contains(LatLng(lat=lat, lng=lng)) is expected

    def test_invalid_point_is_never_contained(self, square):
        """Test that the invalid sentinel is outside every shape."""
        assert not square.contains(LatLng.invalid())

    def test_polygon_contains_polygon(self, square):
        """Test polygon containment."""
        inner = ShapeContainer.from_geometry(Polygon([(0.2, 0.2), (0.8, 0.2), (0.8, 0.8), (0.2, 0.8)]))
        overlapping = ShapeContainer.from_geometry(Polygon([(0.5, 0.5), (1.5, 0.5), (1.5, 1.5), (0.5, 1.5)]))
        disjoint = ShapeContainer.from_geometry(Polygon([(5, 5), (6, 5), (6, 6), (5, 6)]))

        assert square.contains(inner)
        assert not square.contains(overlapping)
        assert square.intersects(overlapping)
        assert not square.intersects(disjoint)

    def test_circle_predicates(self, square):
        """Test circles against points, polygons and other circles."""
        km = 1000.0
        inside = ShapeContainer.circle(LatLng(lat=0.5, lng=0.5), 10 * km)
        straddling = ShapeContainer.circle(LatLng(lat=0.5, lng=1.0), 20 * km)
        far = ShapeContainer.circle(LatLng(lat=30.0, lng=30.0), 10 * km)

        assert square.contains(inside)
        assert not square.contains(straddling)
        assert square.intersects(straddling)
        assert straddling.intersects(square)
        assert not square.intersects(far)
        assert inside.contains(LatLng(lat=0.5, lng=0.55))
        assert not inside.contains(LatLng(lat=0.5, lng=0.8))

    def test_circle_contains_polygon(self, square):
        """Test that a large circle contains the square."""
        circle = ShapeContainer.circle(LatLng(lat=0.5, lng=0.5), 500_000.0)

        assert circle.contains(square)
        assert not square.contains(circle)

    def test_circle_contains_circle(self):
        """Test containment between caps."""
        big = ShapeContainer.circle(LatLng(lat=0.0, lng=0.0), 100_000.0)
        small = ShapeContainer.circle(LatLng(lat=0.0, lng=0.1), 1_000.0)

        assert big.contains(small)
        assert not small.contains(big)
        assert big.intersects(small)

    def test_empty_shapes_match_nothing(self, square):
        """Test that empty shapes never contain or intersect."""
        empty = ShapeContainer.empty()

        assert not empty.contains(LatLng(lat=0.5, lng=0.5))
        assert not square.contains(empty)
        assert not empty.intersects(square)


class TestShapePersistence:
    """Test GeoJSON output and equality."""

    def test_polygon_round_trip(self, square):
        """Test that a polygon survives GeoJSON persistence."""
        restored = ShapeContainer.from_geojson(square.to_geojson())

        assert restored == square
        assert restored.to_geojson()["type"] == "Polygon"

    def test_circle_document(self):
        """Test the circle document layout."""
        doc = ShapeContainer.circle(LatLng(lat=20.0, lng=10.0), 1000.0).to_geojson()

        assert doc["type"] == "Circle"
        assert doc["coordinates"] == [10.0, 20.0]
        assert doc["radius"] == pytest.approx(1000.0)

    def test_circle_round_trip(self):
        """Test that a circle keeps its center and radius."""
        circle = ShapeContainer.circle(LatLng(lat=20.0, lng=10.0), 1000.0)

        restored = ShapeContainer.from_geojson(circle.to_geojson())

        assert restored.shape_type == ShapeType.CIRCLE
        assert restored.bounding_cap().center == circle.bounding_cap().center
        assert restored.bounding_cap().radius == pytest.approx(circle.bounding_cap().radius)

    def test_empty_shape_cannot_be_persisted(self):
        """Test that persisting an empty shape fails fast."""
        with pytest.raises(GeoPreconditionError):
            ShapeContainer.empty().to_geojson()

    def test_equality(self, square):
        """Test equality across shape types."""
        point = ShapeContainer.from_point(LatLng(lat=0.0, lng=0.0))

        assert square == ShapeContainer.from_geojson(SQUARE_GEOJSON)
        assert square != point
        assert point != ShapeContainer.empty()

    def test_equal_shapes_hash_equal(self, square):
        """Test that hashing agrees with equality."""
        circle = ShapeContainer.circle(LatLng(lat=1.0, lng=2.0), 500.0)

        assert hash(square) == hash(ShapeContainer.from_geojson(SQUARE_GEOJSON))
        assert hash(circle) == hash(ShapeContainer.circle(LatLng(lat=1.0, lng=2.0), 500.0))
        assert hash(ShapeContainer.empty()) == hash(ShapeContainer())
        assert len({square, ShapeContainer.from_geojson(SQUARE_GEOJSON), circle, ShapeContainer.empty()}) == 3
