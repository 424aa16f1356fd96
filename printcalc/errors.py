"""
Engine error taxonomy.

All errors are ValueError subclasses so callers that only care about
"bad input" can catch ValueError. Not fitting on a machine is NOT an
error — it is reported as PackingResult.fits = False.
"""


class FormatError(ValueError):
    """Mesh buffer is malformed and cannot be decoded."""


class TruncatedMeshError(FormatError):
    """Buffer is shorter than the header + declared triangle records."""

    def __init__(self, expected: int, actual: int, triangle_count: int = None):
        self.expected = expected
        self.actual = actual
        self.triangle_count = triangle_count
        if triangle_count is None:
            msg = f"Mesh buffer too short: {actual} bytes, need at least {expected}"
        else:
            msg = (
                f"Mesh buffer truncated: {triangle_count} triangles declared, "
                f"need {expected} bytes, got {actual}"
            )
        super().__init__(msg)

    def __reduce__(self):
        return (type(self), (self.expected, self.actual, self.triangle_count))


class MeshTooLargeError(FormatError):
    """Triangle count above the configured ceiling under the "enforce" policy."""

    def __init__(self, triangle_count: int, limit: int):
        self.triangle_count = triangle_count
        self.limit = limit
        super().__init__(
            f"Mesh has {triangle_count:,} triangles, limit is {limit:,}"
        )

    def __reduce__(self):
        return (type(self), (self.triangle_count, self.limit))


class InvalidInput(ValueError):
    """Non-positive or non-finite value, or an unknown lookup key."""


class InvalidState(ValueError):
    """Degenerate rescale (zero-size original or non-finite ratio)."""
