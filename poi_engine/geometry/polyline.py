"""
Encoded polyline codec (Google polyline algorithm, precision 1e5).

Coordinates are [lat, lng] pairs. Values are quantised to 1e-5 degrees, so a
round trip reproduces the input to that precision only.
"""
import math
from typing import Iterable, List, Sequence, Tuple

from poi_engine.errors import InvalidInputError

PRECISION = 1e5


def _round_half_away(value: float) -> int:
    """Round like JavaScript's reference encoder (halves away from zero)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _encode_value(value: int) -> str:
    # zig-zag: (v << 1) ^ (v >> 31) for 32-bit ints
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode(coords: Iterable[Sequence[float]]) -> str:
    """Encode [lat, lng] pairs to a polyline string. Empty input gives ""."""
    out: List[str] = []
    prev_lat = 0
    prev_lng = 0
    for point in coords:
        lat = _round_half_away(float(point[0]) * PRECISION)
        lng = _round_half_away(float(point[1]) * PRECISION)
        out.append(_encode_value(lat - prev_lat))
        out.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng
    return "".join(out)


def _decode_value(encoded: str, index: int) -> Tuple[int, int]:
    shift = 0
    result = 0
    length = len(encoded)
    while True:
        if index >= length:
            raise InvalidInputError("Invalid polyline encoding: truncated value")
        byte = ord(encoded[index]) - 63
        if byte < 0:
            raise InvalidInputError(
                f"Invalid polyline encoding: unexpected character {encoded[index]!r}"
            )
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if byte < 0x20:
            break
    value = ~(result >> 1) if (result & 1) else (result >> 1)
    return value, index


def decode(encoded: str) -> List[List[float]]:
    """Decode a polyline string to [lat, lng] pairs. "" gives []."""
    coords: List[List[float]] = []
    index = 0
    lat = 0
    lng = 0
    length = len(encoded or "")

    while index < length:
        dlat, index = _decode_value(encoded, index)
        dlng, index = _decode_value(encoded, index)
        lat += dlat
        lng += dlng
        coords.append([lat / PRECISION, lng / PRECISION])

    return coords
