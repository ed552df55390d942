"""
Tests for the search_route command-line script.
"""
import json
from unittest.mock import patch

from poi_engine.errors import ProviderError
from poi_engine.geometry.polyline import decode
from scripts.search_route import build_params, load_route_file, run


TRACK = [{"x": -105.27 + i * 0.001, "y": 40.01 + i * 0.001, "d": i * 100.0} for i in range(200)]


def _write(tmp_path, payload, name="route.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


class TestLoadRouteFile:
    def test_unwraps_route_key(self, tmp_path):
        path = _write(tmp_path, {"route": {"id": 1, "track_points": TRACK}})
        assert load_route_file(path)["id"] == 1

    def test_bare_route(self, tmp_path):
        path = _write(tmp_path, {"id": 2, "encoded_polyline": "_p~iF~ps|U"})
        assert load_route_file(path)["encoded_polyline"] == "_p~iF~ps|U"

    def test_rejects_non_object(self, tmp_path):
        path = _write(tmp_path, [1, 2, 3])
        assert run(["--route-file", path, "--provider", "mock", "--query", "x"]) == 2


class TestBuildParams:
    def test_derives_polyline_from_track(self):
        params = build_params({"track_points": TRACK[:3]}, "coffee")
        assert params.text_query == "coffee"
        assert len(decode(params.encoded_polyline)) == 3

    def test_route_without_geometry(self):
        assert build_params({}, "coffee").encoded_polyline is None


class TestRun:
    def test_sample_only(self, tmp_path, capsys):
        path = _write(tmp_path, {"route": {"track_points": TRACK}})
        assert run(["--route-file", path, "--sample-only"]) == 0
        points = json.loads(capsys.readouterr().out)
        # 200 points -> 50 samples, every 4th point
        assert len(points) == 50
        assert points[1][0] == TRACK[4]["y"]

    def test_mock_search(self, tmp_path, capsys):
        path = _write(tmp_path, {"route": {"track_points": TRACK}})
        assert run(["--route-file", path, "--provider", "mock", "--query", "bench"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["status"] == "ok"
        assert out["provider"] == "mock"
        assert out["pois"][0]["name"] == "bench (mock)"

    def test_missing_file(self, tmp_path):
        assert run(["--route-file", str(tmp_path / "nope.json"), "--sample-only"]) == 2

    def test_unknown_provider(self, tmp_path):
        path = _write(tmp_path, {"route": {"track_points": TRACK}})
        assert run(["--route-file", path, "--provider", "bing", "--query", "x"]) == 2

    def test_invalid_query(self, tmp_path):
        path = _write(tmp_path, {"route": {"track_points": TRACK}})
        assert run(["--route-file", path, "--provider", "mock", "--query", ""]) == 2

    @patch("poi_engine.places.providers.mock.MockNormalizer.search")
    def test_provider_failure(self, mock_search, tmp_path):
        mock_search.side_effect = ProviderError("mock", "boom")
        path = _write(tmp_path, {"route": {"track_points": TRACK}})
        assert run(["--route-file", path, "--provider", "mock", "--query", "x"]) == 1
