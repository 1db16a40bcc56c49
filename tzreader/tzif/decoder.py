"""Big-endian primitives used when decoding TZif content.

All TZif integers are stored in network byte order. Callers are expected to
have verified that enough bytes are available at the requested offset.
"""

import struct

__all__ = [
    "read_int32",
    "read_uint32",
    "read_int64",
    "read_string_z",
]

_INT32 = struct.Struct(">l")
_UINT32 = struct.Struct(">L")


def read_int32(buf: bytes, offset: int) -> int:
    """Read a 4 byte two's-complement integer."""
    return _INT32.unpack_from(buf, offset)[0]


def read_uint32(buf: bytes, offset: int) -> int:
    """Read a 4 byte unsigned integer."""
    return _UINT32.unpack_from(buf, offset)[0]


def read_int64(buf: bytes, offset: int) -> int:
    """Read an 8 byte two's-complement integer.

    The value is composed from a signed high word and an unsigned low word,
    e.g. FFFFFFFF FFFFFFFE is (-1 << 32) | 0xFFFFFFFE == -2.
    """
    high = read_int32(buf, offset)
    low = read_uint32(buf, offset + 4)
    return (high << 32) | low


def read_string_z(buf: bytes, offset: int) -> str:
    """Return the NUL terminated string starting at offset.

    A missing terminator reads to the end of the buffer, and an offset at or
    past the end yields an empty string.
    """
    end = buf.find(b"\x00", offset)
    if end == -1:
        end = len(buf)
    return buf[offset:end].decode("utf-8", errors="replace")
