"""
Value types shared by the engine and the HTTP layer.

Every model here is frozen: a summary, a cost breakdown or a packing
result is recomputed from its inputs, never patched in place.
"""

import enum
import math
from typing import List, Optional

from pydantic import BaseModel


class Orientation(str, enum.Enum):
    FLAT = "flat"          # largest footprint, shortest build
    VERTICAL = "vertical"  # smallest footprint, tallest build


class ZSpacingPolicy(str, enum.Enum):
    INCLUDE = "include"  # floor((availH + spacing) / (height + spacing))
    OMIT = "omit"        # floor(availH / height)


class TriangleLimitPolicy(str, enum.Enum):
    ADVISORY = "advisory"
    ENFORCE = "enforce"


class Dimensions(BaseModel):
    """Millimeters. Axis names are positional; orientation reassigns them."""
    width: float
    depth: float
    height: float

    class Config:
        frozen = True

    def as_tuple(self) -> tuple:
        return (self.width, self.depth, self.height)

    def product(self) -> float:
        return self.width * self.depth * self.height

    def is_positive(self) -> bool:
        return all(math.isfinite(v) and v > 0 for v in self.as_tuple())

    def scaled(self, factor: float) -> "Dimensions":
        return Dimensions(
            width=self.width * factor,
            depth=self.depth * factor,
            height=self.height * factor,
        )


class GeometrySummary(BaseModel):
    volume_cm3: float
    dimensions: Dimensions
    triangle_count: int

    class Config:
        frozen = True


class LargeMeshAdvisory(BaseModel):
    triangle_count: int
    threshold: int
    message: str

    class Config:
        frozen = True


class MachineProfile(BaseModel):
    name: str
    bed_dimensions: Dimensions
    layer_time_seconds: float  # seconds per slicing layer
    wall_margin_mm: float

    class Config:
        frozen = True


class PriceTable(BaseModel):
    """Unit prices in one currency."""
    currency: str
    powder_per_kg: float
    binder_per_ml: float
    silica_per_g: float
    glaze_per_g: float

    class Config:
        frozen = True


class MaterialQuantities(BaseModel):
    powder_kg: float
    binder_ml: float
    silica_g: float
    glaze_g: float

    class Config:
        frozen = True


class CostBreakdown(BaseModel):
    powder: float
    binder: float
    silica: float
    glaze: float
    total: float
    currency: Optional[str] = None

    class Config:
        frozen = True


class CostPercentages(BaseModel):
    powder: float
    binder: float
    silica: float
    glaze: float

    class Config:
        frozen = True


class Position(BaseModel):
    """Offset (mm) of one object's minimum corner inside the bed volume."""
    x: float
    y: float
    z: float

    class Config:
        frozen = True


class PackingResult(BaseModel):
    fits: bool
    count_x: int = 0
    count_y: int = 0
    count_z: int = 0
    total_objects: int = 0
    positions: List[Position] = []
    object_dimensions: Dimensions
    print_height_mm: float = 0.0
    print_time_seconds: float = 0.0
    arrangement: str = "0 × 0 × 0"

    class Config:
        frozen = True
