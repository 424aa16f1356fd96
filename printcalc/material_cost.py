"""
Material usage and cost for one printed part.

Pure math — quantity × unit price. Quantities are proportional to part
volume except glaze, which is affine (a fixed base per glazed part plus
a per-cm³ term).
"""

import math

from . import profiles
from .errors import InvalidInput
from .schemas import CostBreakdown, CostPercentages, MaterialQuantities, PriceTable


class MaterialCostModel:
    """
    Material constants are class attributes so a variant process can
    subclass and override them.
    """

    POWDER_DENSITY = profiles.POWDER_DENSITY   # kg/cm³
    BINDER_RATIO = profiles.BINDER_RATIO       # ml/cm³
    SILICA_DENSITY = profiles.SILICA_DENSITY   # g/cm³
    GLAZE_FACTOR = profiles.GLAZE_FACTOR       # g/cm³
    GLAZE_BASE = profiles.GLAZE_BASE           # g per glazed part

    def glaze_usage(self, volume_cm3: float) -> float:
        """Grams of glaze for one part."""
        return self.GLAZE_FACTOR * volume_cm3 + self.GLAZE_BASE

    def usage(self, volume_cm3: float, apply_glaze: bool = True) -> MaterialQuantities:
        """Raises InvalidInput unless volume is finite and > 0."""
        if (isinstance(volume_cm3, bool) or not isinstance(volume_cm3, (int, float))
                or not math.isfinite(volume_cm3) or volume_cm3 <= 0):
            raise InvalidInput(f"Invalid volume: {volume_cm3!r} (must be a finite number > 0)")

        return MaterialQuantities(
            powder_kg=volume_cm3 * self.POWDER_DENSITY,
            binder_ml=volume_cm3 * self.BINDER_RATIO,
            silica_g=volume_cm3 * self.SILICA_DENSITY,
            glaze_g=self.glaze_usage(volume_cm3) if apply_glaze else 0.0,
        )

    def cost(self, quantities: MaterialQuantities, prices: PriceTable) -> CostBreakdown:
        """Each quantity × its unit price; total is the plain sum of the four."""
        powder = quantities.powder_kg * prices.powder_per_kg
        binder = quantities.binder_ml * prices.binder_per_ml
        silica = quantities.silica_g * prices.silica_per_g
        glaze = quantities.glaze_g * prices.glaze_per_g
        return CostBreakdown(
            powder=powder,
            binder=binder,
            silica=silica,
            glaze=glaze,
            total=powder + binder + silica + glaze,
            currency=prices.currency,
        )

    def percentages(self, costs: CostBreakdown) -> CostPercentages:
        """Share of total per component, for display. All zero when total is 0."""
        total = costs.total
        if not total:
            return CostPercentages(powder=0.0, binder=0.0, silica=0.0, glaze=0.0)
        return CostPercentages(
            powder=costs.powder / total * 100,
            binder=costs.binder / total * 100,
            silica=costs.silica / total * 100,
            glaze=costs.glaze / total * 100,
        )

    def total_weight_g(self, quantities: MaterialQuantities) -> float:
        """Solid weight: powder (kg → g) + silica + glaze. Binder burns off."""
        return quantities.powder_kg * 1000 + quantities.silica_g + quantities.glaze_g

    def estimate(self, volume_cm3: float, prices: PriceTable, apply_glaze: bool = True) -> dict:
        """usage + cost + percentages + weight in one dict."""
        quantities = self.usage(volume_cm3, apply_glaze)
        costs = self.cost(quantities, prices)
        return {
            "volume_cm3": volume_cm3,
            "materials": quantities,
            "costs": costs,
            "percentages": self.percentages(costs),
            "weight_g": self.total_weight_g(quantities),
            "currency": prices.currency,
        }
