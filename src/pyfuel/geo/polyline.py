"""polyline6 route geometry decoding.

The routing service returns geometry in the encoded polyline format with
**six** decimal digits of precision (``geometries=polyline6``), not the
five-digit variant used by most map SDKs.  Decoding a polyline6 string with
a 1e5 divisor produces coordinates ten times too large, so the precision is
a parameter only for callers that know they hold the other format.
"""

from __future__ import annotations

from pyfuel._constants import POLYLINE6_PRECISION
from pyfuel.exceptions import PolylineDecodeError
from pyfuel.models.geo import LatLng

_CHUNK_OFFSET = 63
_CONTINUATION_BIT = 0x20
_CHUNK_MASK = 0x1F
_MAX_CHAR = 126


def _read_varint(encoded: str, index: int) -> tuple[int, int]:
    """Read one zig-zag varint starting at *index*; return ``(value, next_index)``."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise PolylineDecodeError(f"Truncated polyline: stream ends inside a value at offset {index}")
        code = ord(encoded[index])
        if code < _CHUNK_OFFSET or code > _MAX_CHAR:
            raise PolylineDecodeError(f"Invalid polyline character {encoded[index]!r} at offset {index}")
        chunk = code - _CHUNK_OFFSET
        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION_BIT:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode(encoded: str, *, precision: int = POLYLINE6_PRECISION) -> list[LatLng]:
    """Decode an encoded polyline into an ordered list of coordinates.

    Raises :class:`PolylineDecodeError` when the string is truncated, holds
    an unpaired latitude, or contains characters outside ``?``..``~``.
    """
    coordinates: list[LatLng] = []
    index = 0
    lat = 0
    lng = 0
    while index < len(encoded):
        delta_lat, index = _read_varint(encoded, index)
        if index >= len(encoded):
            raise PolylineDecodeError("Truncated polyline: latitude without longitude")
        delta_lng, index = _read_varint(encoded, index)
        lat += delta_lat
        lng += delta_lng
        coordinates.append(LatLng(latitude=lat / precision, longitude=lng / precision))
    return coordinates
