"""
Estimate builder — combines the engine outputs for one part.

Input: GeometrySummary (from the decoder, possibly rescaled) + orientation,
currency and glaze choice.
Output: one estimate dict with materials, costs, capacity on every machine,
both orientation options, and pre-formatted display strings.

Pure math. Machine profiles and price tables are passed in at construction,
never looked up from module state at call time.
"""

import logging

from . import profiles
from .capacity import CapacityPlanner, orient_dimensions
from .config import EngineConfig
from .formatting import format_currency, format_dimensions, format_print_time
from .material_cost import MaterialCostModel
from .schemas import GeometrySummary, LargeMeshAdvisory, Orientation

logger = logging.getLogger(__name__)


class EstimateBuilder:

    def __init__(self, config: EngineConfig = None, machines: dict = None,
                 price_tables: dict = None):
        self.config = config or EngineConfig()
        self.machines = machines or profiles.MACHINES
        self.price_tables = price_tables or profiles.PRICE_TABLES
        self.planner = CapacityPlanner(self.config)
        self.cost_model = MaterialCostModel()

    def price_table(self, currency: str):
        return profiles.lookup_price_table(self.price_tables, currency)

    def build(self, summary: GeometrySummary, orientation: Orientation = Orientation.FLAT,
              currency: str = "USD", apply_glaze: bool = True,
              advisory: LargeMeshAdvisory = None, spacing_mm: float = None) -> dict:
        """
        Assemble the full estimate for one part.

        Raises InvalidInput for a non-positive volume or unknown currency.
        Machines the part does not fit on still appear, with fits=False.
        """
        orientation = Orientation(orientation)
        prices = self.price_table(currency)
        material = self.cost_model.estimate(summary.volume_cm3, prices, apply_glaze)

        capacity = {
            key: self.planner.plan(summary.dimensions, orientation, profile, spacing_mm)
            for key, profile in self.machines.items()
        }
        fits_anywhere = any(result.fits for result in capacity.values())
        if not fits_anywhere:
            logger.info(
                "Part %s does not fit any machine in %s orientation",
                format_dimensions(summary.dimensions), orientation.value,
            )

        costs = material["costs"]
        return {
            "summary": summary,
            "orientation": orientation.value,
            "apply_glaze": apply_glaze,
            "currency": prices.currency,
            "materials": material["materials"],
            "costs": costs,
            "percentages": material["percentages"],
            "weight_g": material["weight_g"],
            "capacity": capacity,
            "orientation_options": self.orientation_options(summary),
            "advisory": advisory,
            "display": {
                "dimensions": format_dimensions(summary.dimensions),
                "total_cost": format_currency(costs.total, prices.currency),
                "print_times": {
                    key: format_print_time(result.print_time_seconds) if result.fits else "--"
                    for key, result in capacity.items()
                },
            },
        }

    def orientation_options(self, summary: GeometrySummary) -> dict:
        """
        Both orientations with single-copy print time per machine
        (None where the part does not fit).
        """
        options = {}
        for orientation in Orientation:
            options[orientation.value] = {
                "dimensions": orient_dimensions(summary.dimensions, orientation),
                "print_times": {
                    key: self.planner.object_print_time(summary.dimensions, orientation, profile)
                    for key, profile in self.machines.items()
                },
            }
        return options
