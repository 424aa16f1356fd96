from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import estimates, reference

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("printcalc")

app = FastAPI(
    title="Ceramic Print Estimator",
    description="Volume, material cost and machine capacity from binary STL meshes",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimates.router, prefix="/api")
app.include_router(reference.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.on_event("shutdown")
def stop_decode_workers():
    """Release the decode worker pool."""
    logger.info("Shutting down decode workers")
    estimates.get_decode_service().shutdown(wait=False)
