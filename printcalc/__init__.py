"""
Geometry & capacity engine for ceramic binder-jet printing.

Binary STL → volume and bounding box → material cost and how many
copies fit on each machine. Pure Python math; the FastAPI app in
printcalc.main is a thin HTTP surface over the engine.
"""

from .capacity import CapacityPlanner, orient_dimensions
from .config import EngineConfig
from .decode_jobs import DecodeJob, DecodeOutcome, DecodeService
from .errors import (
    FormatError,
    InvalidInput,
    InvalidState,
    MeshTooLargeError,
    TruncatedMeshError,
)
from .estimator import EstimateBuilder
from .material_cost import MaterialCostModel
from .mesh_decoder import MeshDecoder, decode_mesh
from .scaling import ScalingTransform
from .schemas import (
    CostBreakdown,
    Dimensions,
    GeometrySummary,
    MachineProfile,
    MaterialQuantities,
    Orientation,
    PackingResult,
    Position,
    PriceTable,
)
