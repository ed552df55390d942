"""
Tests for route geometry: track points, polyline derivation and elevation.
"""
from poi_engine.geometry.polyline import decode, encode
from poi_engine.geometry.route import RouteGeometry

TRACK_POINTS = [
    {"x": -122.4194, "y": 37.7749, "d": 0.0, "e": 16.0},
    {"x": -122.4100, "y": 37.7800, "d": 1040.5, "e": 31.2},
    {"x": -122.4000, "y": 37.7900, "d": 2301.0},
]


class TestFromRoutePayload:
    def test_reads_polyline_and_track_points(self):
        geometry = RouteGeometry.from_route_payload({
            "encoded_polyline": "_p~iF~ps|U",
            "track_points": TRACK_POINTS,
        })
        assert geometry.encoded_polyline == "_p~iF~ps|U"
        assert len(geometry.track_points) == 3
        assert geometry.track_points[0].x == -122.4194
        assert geometry.track_points[2].e is None

    def test_skips_unusable_track_points(self):
        geometry = RouteGeometry.from_route_payload({
            "track_points": [
                {"x": -122.4, "y": 37.7},
                {"x": None, "y": 37.8},
                {"x": "nan", "y": 37.8},
                {"y": 37.9},
                "garbage",
                {"x": "-122.5", "y": "37.6"},
            ],
        })
        assert [[p.y, p.x] for p in geometry.track_points] == [[37.7, -122.4], [37.6, -122.5]]

    def test_empty_route(self):
        geometry = RouteGeometry.from_route_payload({})
        assert geometry.encoded_polyline is None
        assert geometry.track_points == []
        assert geometry.has_route is False


class TestEnsureEncodedPolyline:
    def test_keeps_existing_polyline(self):
        geometry = RouteGeometry.from_route_payload({
            "encoded_polyline": "_p~iF~ps|U",
            "track_points": TRACK_POINTS,
        })
        assert geometry.ensure_encoded_polyline() == "_p~iF~ps|U"

    def test_derives_from_track_points(self):
        geometry = RouteGeometry.from_route_payload({"track_points": TRACK_POINTS})
        derived = geometry.ensure_encoded_polyline()
        assert derived == encode([[p["y"], p["x"]] for p in TRACK_POINTS])
        # stored, so later consumers use the same string
        assert geometry.encoded_polyline == derived
        decoded = decode(derived)
        assert abs(decoded[0][0] - 37.7749) < 1e-5
        assert abs(decoded[0][1] - -122.4194) < 1e-5

    def test_no_geometry_gives_none(self):
        geometry = RouteGeometry.from_route_payload({"track_points": []})
        assert geometry.ensure_encoded_polyline() is None


class TestCoordinates:
    def test_prefers_polyline(self):
        geometry = RouteGeometry.from_route_payload({
            "encoded_polyline": encode([[1.0, 2.0]]),
            "track_points": TRACK_POINTS,
        })
        assert geometry.coordinates() == [[1.0, 2.0]]

    def test_falls_back_to_track_points(self):
        geometry = RouteGeometry.from_route_payload({"track_points": TRACK_POINTS})
        assert geometry.coordinates()[1] == [37.7800, -122.4100]


class TestElevationProfile:
    def test_profile_values(self):
        geometry = RouteGeometry.from_route_payload({"track_points": TRACK_POINTS})
        profile = geometry.elevation_profile()
        assert [p.index for p in profile] == [0, 1, 2]
        assert profile[1].distance_m == 1040.5
        assert profile[1].elevation_m == 31.2
        assert profile[1].lat == 37.7800
        assert profile[1].lng == -122.4100

    def test_missing_elevation_defaults_to_zero(self):
        geometry = RouteGeometry.from_route_payload({"track_points": TRACK_POINTS})
        assert geometry.elevation_profile()[2].elevation_m == 0.0
