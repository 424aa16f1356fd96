"""
Binary STL decoder — volume, bounding dimensions and triangle count.

Layout (little-endian):
    0    80 B   header (ignored)
    80    4 B   triangle count N (u32)
    84   50 B   × N records: normal (3×f32, ignored), v1, v2, v3 (3×f32 each),
                attribute byte count (u16, ignored)

Volume is the divergence-theorem sum of signed tetrahedra from the origin,
so it is exact for closed, consistently wound meshes. Open or
self-intersecting meshes still produce a defined (but wrong) number; there
is no watertightness check.

Decoding is a pure left fold over the triangle stream. Splitting the stream
into batches changes nothing numerically: triangles are visited in file
order and accumulated into the same three running values.
"""

import asyncio
import math
import struct
from typing import Callable, Iterator, Optional

from .config import EngineConfig
from .errors import FormatError, MeshTooLargeError, TruncatedMeshError
from .schemas import (
    Dimensions,
    GeometrySummary,
    LargeMeshAdvisory,
    TriangleLimitPolicy,
)

HEADER_SIZE = 80
PREAMBLE_SIZE = 84
RECORD_SIZE = 50

_COUNT = struct.Struct("<I")
# 12 bytes of normal skipped, 9 vertex floats, 2 attribute bytes skipped
_RECORD = struct.Struct("<12x9f2x")


class MeshAccumulator:
    """
    Running state of the decode fold.

    signed_volume is in mm³ and keeps its sign until summary(); the
    bounds start at ±inf so the first vertex always replaces them.
    """

    __slots__ = (
        "signed_volume", "triangles",
        "min_x", "min_y", "min_z",
        "max_x", "max_y", "max_z",
    )

    def __init__(self):
        self.signed_volume = 0.0
        self.triangles = 0
        self.min_x = self.min_y = self.min_z = math.inf
        self.max_x = self.max_y = self.max_z = -math.inf

    def feed(self, records) -> int:
        """
        Fold a buffer of whole 50-byte triangle records into the state.
        Returns the number of triangles consumed.
        """
        volume = self.signed_volume
        min_x, min_y, min_z = self.min_x, self.min_y, self.min_z
        max_x, max_y, max_z = self.max_x, self.max_y, self.max_z
        count = 0

        for (v1x, v1y, v1z,
             v2x, v2y, v2z,
             v3x, v3y, v3z) in _RECORD.iter_unpack(records):
            min_x = min(min_x, v1x, v2x, v3x)
            min_y = min(min_y, v1y, v2y, v3y)
            min_z = min(min_z, v1z, v2z, v3z)
            max_x = max(max_x, v1x, v2x, v3x)
            max_y = max(max_y, v1y, v2y, v3y)
            max_z = max(max_z, v1z, v2z, v3z)

            # dot(v1, cross(v2 - v1, v3 - v1)) / 6
            ax, ay, az = v2x - v1x, v2y - v1y, v2z - v1z
            bx, by, bz = v3x - v1x, v3y - v1y, v3z - v1z
            cross_x = ay * bz - az * by
            cross_y = az * bx - ax * bz
            cross_z = ax * by - ay * bx
            volume += (v1x * cross_x + v1y * cross_y + v1z * cross_z) / 6.0
            count += 1

        self.signed_volume = volume
        self.min_x, self.min_y, self.min_z = min_x, min_y, min_z
        self.max_x, self.max_y, self.max_z = max_x, max_y, max_z
        self.triangles += count
        return count

    def summary(self, triangle_count: int = None) -> GeometrySummary:
        """Finalize: mm³ → cm³ (absolute, so winding does not matter)."""
        if self.triangles == 0:
            dimensions = Dimensions(width=0.0, depth=0.0, height=0.0)
        else:
            dimensions = Dimensions(
                width=self.max_x - self.min_x,
                depth=self.max_y - self.min_y,
                height=self.max_z - self.min_z,
            )
        return GeometrySummary(
            volume_cm3=abs(self.signed_volume) / 1000.0,
            dimensions=dimensions,
            triangle_count=self.triangles if triangle_count is None else triangle_count,
        )


class MeshDecoder:
    """
    Decodes binary STL buffers into a GeometrySummary.

    Holds only its (frozen) config, so one instance can be shared across
    threads and used for any number of concurrent decodes.
    """

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()

    # --- Header / validation ---

    def read_triangle_count(self, data) -> int:
        """Declared triangle count from bytes 80..84."""
        if len(data) < PREAMBLE_SIZE:
            raise TruncatedMeshError(expected=PREAMBLE_SIZE, actual=len(data))
        return _COUNT.unpack_from(data, HEADER_SIZE)[0]

    def check_triangle_count(self, triangle_count: int) -> Optional[LargeMeshAdvisory]:
        """
        Apply the triangle-limit policy.

        Advisory policy returns a LargeMeshAdvisory above the threshold
        (None otherwise). Enforce policy raises MeshTooLargeError instead.
        """
        threshold = self.config.large_mesh_triangles
        if triangle_count <= threshold:
            return None
        if self.config.triangle_limit_policy == TriangleLimitPolicy.ENFORCE:
            raise MeshTooLargeError(triangle_count, threshold)
        return LargeMeshAdvisory(
            triangle_count=triangle_count,
            threshold=threshold,
            message=(
                f"Processing {triangle_count / 1_000_000:.1f}M triangles. "
                f"This may take some time and use significant memory."
            ),
        )

    def _prepare(self, data) -> tuple:
        """Validate the buffer; returns (memoryview, triangle_count)."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise FormatError(f"Expected a bytes-like buffer, got {type(data).__name__}")
        view = memoryview(data).cast("B")
        triangle_count = self.read_triangle_count(view)
        expected = PREAMBLE_SIZE + RECORD_SIZE * triangle_count
        if len(view) < expected:
            raise TruncatedMeshError(
                expected=expected, actual=len(view), triangle_count=triangle_count,
            )
        self.check_triangle_count(triangle_count)
        return view, triangle_count

    def _batches(self, view, triangle_count: int, batch_size: int = None) -> Iterator[memoryview]:
        size = self.config.decode_batch_size if batch_size is None else batch_size
        if size < 1:
            raise ValueError(f"batch_size must be >= 1, got {size}")
        for start in range(0, triangle_count, size):
            stop = min(start + size, triangle_count)
            yield view[PREAMBLE_SIZE + start * RECORD_SIZE:PREAMBLE_SIZE + stop * RECORD_SIZE]

    # --- Decoding ---

    def decode(self, data, batch_size: int = None) -> GeometrySummary:
        """Blocking decode. Raises FormatError on a malformed buffer."""
        view, triangle_count = self._prepare(data)
        acc = MeshAccumulator()
        for batch in self._batches(view, triangle_count, batch_size):
            acc.feed(batch)
        return acc.summary(triangle_count)

    async def decode_async(
        self,
        data,
        batch_size: int = None,
        on_progress: Callable[[int, int], None] = None,
    ) -> GeometrySummary:
        """
        Cooperative decode: yields to the event loop after every batch.

        Produces exactly the same summary as decode(). Cancelling the task
        drops the accumulator; no partial result is ever returned.
        """
        view, triangle_count = self._prepare(data)
        acc = MeshAccumulator()
        for batch in self._batches(view, triangle_count, batch_size):
            acc.feed(batch)
            if on_progress is not None:
                on_progress(acc.triangles, triangle_count)
            await asyncio.sleep(0)
        return acc.summary(triangle_count)

    def advisory(self, summary: GeometrySummary) -> Optional[LargeMeshAdvisory]:
        """Large-mesh advisory for an already decoded summary, if any."""
        return self.check_triangle_count(summary.triangle_count)


def decode_mesh(data, config: EngineConfig = None) -> GeometrySummary:
    """Module-level entry point; picklable for process-pool workers."""
    return MeshDecoder(config).decode(data)
