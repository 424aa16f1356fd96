"""Binary STL builders for tests."""

import struct

_TRIANGLE = struct.Struct("<12fH")

# Outward-facing (counter-clockwise seen from outside) box faces
_BOX_FACES = [
    (0, 2, 1), (0, 3, 2),  # bottom
    (4, 5, 6), (4, 6, 7),  # top
    (0, 1, 5), (0, 5, 4),  # front
    (3, 7, 6), (3, 6, 2),  # back
    (0, 4, 7), (0, 7, 3),  # left
    (1, 2, 6), (1, 6, 5),  # right
]


def pack_stl(triangles, header: bytes = b"test mesh") -> bytes:
    """triangles: iterable of (v1, v2, v3), each an (x, y, z) tuple."""
    triangles = list(triangles)
    out = [header.ljust(80, b"\0")[:80], struct.pack("<I", len(triangles))]
    for v1, v2, v3 in triangles:
        out.append(_TRIANGLE.pack(0.0, 0.0, 0.0, *v1, *v2, *v3, 0))
    return b"".join(out)


def box_triangles(width, depth, height, origin=(0.0, 0.0, 0.0), reverse=False):
    """12 triangles of an axis-aligned box with its minimum corner at origin."""
    ox, oy, oz = origin
    verts = [
        (ox, oy, oz), (ox + width, oy, oz),
        (ox + width, oy + depth, oz), (ox, oy + depth, oz),
        (ox, oy, oz + height), (ox + width, oy, oz + height),
        (ox + width, oy + depth, oz + height), (ox, oy + depth, oz + height),
    ]
    tris = []
    for a, b, c in _BOX_FACES:
        if reverse:
            tris.append((verts[a], verts[c], verts[b]))
        else:
            tris.append((verts[a], verts[b], verts[c]))
    return tris
