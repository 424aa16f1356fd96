"""
Estimate API — mesh upload to manufacturing estimate.

POST /api/estimates/upload    — Upload a binary STL, get volume, cost and capacity
POST /api/estimates/rescale   — Re-estimate a decoded part at new dimensions
POST /api/estimates/capacity  — Pack one object on one machine
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel

from ..capacity import CapacityPlanner, orient_dimensions
from ..config import EngineConfig, settings
from ..decode_jobs import DecodeService
from ..errors import FormatError, InvalidInput, InvalidState, MeshTooLargeError
from ..estimator import EstimateBuilder
from ..formatting import format_file_size
from ..profiles import get_machine
from ..scaling import ScalingTransform
from ..schemas import Dimensions, GeometrySummary, Orientation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimates", tags=["estimates"])

ALLOWED_EXTENSIONS = {"stl"}

# Singletons: frozen config, no per-request state
engine_config = EngineConfig.from_settings()
_decode_service = DecodeService(
    engine_config,
    executor_kind=settings.DECODE_EXECUTOR,
    max_workers=settings.DECODE_WORKERS,
)
_builder = EstimateBuilder(engine_config)
_planner = CapacityPlanner(engine_config)
_scaler = ScalingTransform()


def get_decode_service() -> DecodeService:
    return _decode_service


def get_builder() -> EstimateBuilder:
    return _builder


def _get_extension(filename: str) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def _build_or_400(builder: EstimateBuilder, summary: GeometrySummary, **kwargs) -> dict:
    try:
        return builder.build(summary, **kwargs)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


# --- Request schemas ---

class RescaleRequest(BaseModel):
    summary: GeometrySummary
    dimensions: Optional[Dimensions] = None
    factor: Optional[float] = None
    axis: Optional[str] = None     # with `value`: scale uniformly so this axis
    value: Optional[float] = None  # becomes `value` mm
    orientation: Orientation = Orientation.FLAT
    currency: str = settings.DEFAULT_CURRENCY
    apply_glaze: bool = True


class CapacityRequest(BaseModel):
    dimensions: Dimensions
    orientation: Orientation = Orientation.FLAT
    machine: str = "400"
    spacing_mm: Optional[float] = None


# --- Endpoints ---

@router.post("/upload")
async def upload_mesh(
    file: UploadFile = File(...),
    orientation: Orientation = Form(Orientation.FLAT),
    currency: str = Form(settings.DEFAULT_CURRENCY),
    apply_glaze: bool = Form(True),
    decode_service: DecodeService = Depends(get_decode_service),
    builder: EstimateBuilder = Depends(get_builder),
):
    """
    Upload a binary STL and estimate it.

    - Validates file type (.stl) and size (max MAX_UPLOAD_MB)
    - Decodes on the worker pool (in-process retry if the pool fails)
    - Returns summary, materials, costs and capacity on every machine
    """
    ext = _get_extension(file.filename or "")
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Invalid STL file format. Please upload a valid STL file.",
        )

    file_bytes = await file.read()

    max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    if len(file_bytes) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large ({format_file_size(len(file_bytes))}). "
                   f"Maximum is {settings.MAX_UPLOAD_MB}MB.",
        )
    if len(file_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file.")

    try:
        outcome = await decode_service.decode_async(file_bytes)
    except MeshTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except FormatError as e:
        logger.info("Rejected mesh %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))

    estimate = _build_or_400(
        builder, outcome.summary,
        orientation=orientation, currency=currency,
        apply_glaze=apply_glaze, advisory=outcome.advisory,
    )
    estimate["file"] = {
        "filename": file.filename,
        "size_bytes": len(file_bytes),
        "size": format_file_size(len(file_bytes)),
    }
    estimate["processing_time_ms"] = outcome.elapsed_ms
    estimate["executed_in"] = outcome.executed_in
    return estimate


@router.post("/rescale")
def rescale_estimate(
    request: RescaleRequest,
    builder: EstimateBuilder = Depends(get_builder),
):
    """
    Re-estimate a part at new size. Exactly one of: `dimensions`,
    `factor`, or `axis` + `value`.
    """
    given = [
        request.dimensions is not None,
        request.factor is not None,
        request.axis is not None or request.value is not None,
    ]
    if sum(given) != 1:
        raise HTTPException(
            status_code=400,
            detail="Provide exactly one of: dimensions, factor, or axis + value.",
        )

    try:
        if request.dimensions is not None:
            scaled = _scaler.rescale(request.summary, request.dimensions)
            factor = None
        else:
            if request.factor is not None:
                factor = request.factor
            else:
                if request.axis is None or request.value is None:
                    raise InvalidInput("Both axis and value are required.")
                factor = _scaler.factor_for_dimension(
                    request.summary.dimensions, request.axis, request.value,
                )
            scaled = _scaler.rescale_by_factor(request.summary, factor)
    except (InvalidInput, InvalidState) as e:
        raise HTTPException(status_code=400, detail=str(e))

    estimate = _build_or_400(
        builder, scaled,
        orientation=request.orientation, currency=request.currency,
        apply_glaze=request.apply_glaze,
    )
    estimate["scale_factor"] = factor
    return estimate


@router.post("/capacity")
def plan_capacity(request: CapacityRequest):
    """
    Pack copies of one object on one machine.

    Rejects negative spacing, and layouts above MAX_PACKED_OBJECTS
    copies, before any positions are generated.
    """
    try:
        profile = get_machine(request.machine)
    except InvalidInput as e:
        raise HTTPException(status_code=404, detail=str(e))

    spacing = engine_config.object_spacing_mm if request.spacing_mm is None else request.spacing_mm
    if not math.isfinite(spacing) or spacing < 0:
        raise HTTPException(
            status_code=400,
            detail=f"spacing_mm must be a finite number >= 0, got {request.spacing_mm}",
        )

    oriented = orient_dimensions(request.dimensions, request.orientation)
    if _planner.fits(oriented, profile):
        count_x, count_y, count_z = _planner.grid_counts(oriented, profile, spacing)
        total = count_x * count_y * count_z
        if total > settings.MAX_PACKED_OBJECTS:
            raise HTTPException(
                status_code=400,
                detail=f"Layout of {total:,} objects exceeds the limit of "
                       f"{settings.MAX_PACKED_OBJECTS:,}. Use a larger object or more spacing.",
            )

    return _planner.plan(request.dimensions, request.orientation, profile, spacing)
