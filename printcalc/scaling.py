"""
Rescaling a decoded part.

Volume scales with the product of the per-axis ratios, so a uniform
factor f multiplies volume by f³. Returns a new GeometrySummary; the
original is never modified.
"""

import math

from .errors import InvalidInput, InvalidState
from .schemas import Dimensions, GeometrySummary

AXES = ("width", "depth", "height")


class ScalingTransform:

    def rescale(self, original: GeometrySummary, new_dimensions: Dimensions) -> GeometrySummary:
        """
        Recompute volume for new target dimensions.

        Raises InvalidState if any original dimension is <= 0 or the
        volume ratio is not finite, InvalidInput for a non-positive target.
        """
        if not original.dimensions.is_positive():
            raise InvalidState(
                f"Cannot rescale: original dimensions {original.dimensions.as_tuple()} "
                f"must all be > 0"
            )
        if not new_dimensions.is_positive():
            raise InvalidInput(
                f"Target dimensions {new_dimensions.as_tuple()} must all be finite and > 0"
            )

        original_product = original.dimensions.product()
        if original_product == 0:
            raise InvalidState("Cannot rescale: original volume box underflows to zero")
        ratio = new_dimensions.product() / original_product
        if not math.isfinite(ratio):
            raise InvalidState(f"Cannot rescale: volume ratio is {ratio}")

        return GeometrySummary(
            volume_cm3=original.volume_cm3 * ratio,
            dimensions=new_dimensions,
            triangle_count=original.triangle_count,
        )

    def rescale_by_factor(self, original: GeometrySummary, factor: float) -> GeometrySummary:
        """Uniform scale on all three axes."""
        if not math.isfinite(factor) or factor <= 0:
            raise InvalidInput(f"Scale factor must be a finite number > 0, got {factor!r}")
        return self.rescale(original, original.dimensions.scaled(factor))

    def factor_for_dimension(self, original: Dimensions, axis: str, new_value: float) -> float:
        """
        Uniform factor implied by editing one dimension, e.g. setting
        width from 40 to 60 gives 1.5.
        """
        if axis not in AXES:
            raise InvalidInput(f"Unknown axis: {axis}. Use one of {list(AXES)}")
        if not math.isfinite(new_value) or new_value <= 0:
            raise InvalidInput(f"Dimension must be a finite number > 0, got {new_value!r}")
        current = getattr(original, axis)
        if not math.isfinite(current) or current <= 0:
            raise InvalidState(f"Cannot derive a factor from {axis}={current}")
        return new_value / current
