"""
Tests for the encoded polyline codec.
"""
import pytest

from poi_engine.errors import InvalidInputError
from poi_engine.geometry.polyline import decode, encode

# Reference example from the polyline algorithm documentation
REFERENCE_COORDS = [[38.5, -120.2], [40.7, -120.95], [43.252, -126.453]]
REFERENCE_ENCODED = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def _assert_close(actual, expected, tol=1e-5):
    assert len(actual) == len(expected)
    for (alat, alng), (elat, elng) in zip(actual, expected):
        assert abs(alat - elat) <= tol
        assert abs(alng - elng) <= tol


class TestEncode:
    def test_reference_vector(self):
        assert encode(REFERENCE_COORDS) == REFERENCE_ENCODED

    def test_empty_list(self):
        assert encode([]) == ""

    def test_single_point(self):
        assert encode([[38.5, -120.2]]) == "_p~iF~ps|U"

    def test_accepts_tuples(self):
        assert encode([tuple(c) for c in REFERENCE_COORDS]) == REFERENCE_ENCODED

    def test_output_is_ascii(self):
        encoded = encode([[-33.8688, 151.2093], [51.5074, -0.1278]])
        assert all(63 <= ord(ch) <= 126 for ch in encoded)


class TestDecode:
    def test_reference_vector(self):
        _assert_close(decode(REFERENCE_ENCODED), REFERENCE_COORDS)

    def test_empty_string(self):
        assert decode("") == []

    def test_truncated_input_rejected(self):
        with pytest.raises(InvalidInputError):
            decode(REFERENCE_ENCODED[:-1])

    def test_invalid_character_rejected(self):
        with pytest.raises(InvalidInputError):
            decode("_p~iF ps|U")


class TestRoundTrip:
    @pytest.mark.parametrize("coords", [
        [],
        [[0.0, 0.0]],
        [[35.6812, 139.7671], [35.6580, 139.7016]],
        [[-33.868812, 151.209312], [-33.86, 151.2], [-34.0, 150.999999]],
        [[89.99999, 179.99999], [-89.99999, -179.99999]],
    ])
    def test_round_trip_within_precision(self, coords):
        _assert_close(decode(encode(coords)), coords)

    def test_long_route(self):
        coords = [[45.0 + i * 0.00137, -122.0 - i * 0.00091] for i in range(500)]
        _assert_close(decode(encode(coords)), coords)
