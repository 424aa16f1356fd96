"""
Decode jobs — run MeshDecoder off the caller's thread.

A DecodeJob is a plain, picklable unit of work (buffer + config) that
runs the same pure decode everywhere: on a thread pool, on a process
pool, or inline. DecodeService submits jobs to a concurrent.futures
executor and hands back a Future (or awaits it on the running loop).

Graceful fallback: if the worker side breaks (pool shut down, process
died, out of memory), the identical job is re-run in-process. Format
errors are NOT retried — a malformed buffer is malformed everywhere.
"""

import asyncio
import logging
import time
from concurrent.futures import (
    BrokenExecutor,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
)
from typing import Optional

from pydantic import BaseModel

from .config import EngineConfig
from .errors import FormatError
from .mesh_decoder import MeshDecoder
from .schemas import GeometrySummary, LargeMeshAdvisory

logger = logging.getLogger(__name__)

# Worker-side failures that trigger the in-process retry
WORKER_FAILURES = (BrokenExecutor, RuntimeError, OSError, MemoryError)


class DecodeOutcome(BaseModel):
    summary: GeometrySummary
    advisory: Optional[LargeMeshAdvisory] = None
    elapsed_ms: float
    executed_in: str  # "worker" | "in_process"

    class Config:
        frozen = True


class DecodeJob:
    """One decode request. Read-only buffer in, DecodeOutcome out."""

    def __init__(self, data: bytes, config: EngineConfig = None):
        self.data = data
        self.config = config or EngineConfig()

    def run(self, executed_in: str = "worker") -> DecodeOutcome:
        decoder = MeshDecoder(self.config)
        start = time.perf_counter()
        summary = decoder.decode(self.data)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return DecodeOutcome(
            summary=summary,
            advisory=decoder.advisory(summary),
            elapsed_ms=round(elapsed_ms, 3),
            executed_in=executed_in,
        )

    async def run_cooperative(self) -> DecodeOutcome:
        """In-process fallback that yields to the event loop between batches."""
        decoder = MeshDecoder(self.config)
        start = time.perf_counter()
        summary = await decoder.decode_async(self.data)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return DecodeOutcome(
            summary=summary,
            advisory=decoder.advisory(summary),
            elapsed_ms=round(elapsed_ms, 3),
            executed_in="in_process",
        )


def run_decode_job(job: DecodeJob) -> DecodeOutcome:
    """Module-level so process pools can pickle it."""
    return job.run()


class DecodeService:
    """
    Owns the executor. Construct once per application and share.

    executor_kind: "thread" (default) or "process". An explicit executor
    may be injected instead (tests do this to simulate broken pools).
    """

    def __init__(self, config: EngineConfig = None, executor_kind: str = "thread",
                 max_workers: int = 2, executor: Executor = None):
        self.config = config or EngineConfig()
        if executor is not None:
            self._executor = executor
        elif executor_kind == "process":
            self._executor = ProcessPoolExecutor(max_workers=max_workers)
        elif executor_kind == "thread":
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="mesh-decode",
            )
        else:
            raise ValueError(
                f"Unknown executor kind: {executor_kind}. Use 'thread' or 'process'."
            )

    def make_job(self, data: bytes) -> DecodeJob:
        return DecodeJob(bytes(data), self.config)

    def submit(self, data: bytes) -> Future:
        """Submit a decode job; the Future resolves to a DecodeOutcome."""
        return self._executor.submit(run_decode_job, self.make_job(data))

    def decode(self, data: bytes) -> DecodeOutcome:
        """Blocking decode on the pool, with in-process retry on worker failure."""
        job = self.make_job(data)
        try:
            outcome = self._executor.submit(run_decode_job, job).result()
        except FormatError:
            raise
        except WORKER_FAILURES as e:
            logger.warning("Decode worker failed (%s), retrying in-process", e)
            outcome = job.run(executed_in="in_process")
        return self._report(outcome)

    async def decode_async(self, data: bytes) -> DecodeOutcome:
        """
        Await a decode on the pool from the running event loop.

        Cancelling the awaiting task discards the pending result.
        """
        job = self.make_job(data)
        loop = asyncio.get_running_loop()
        try:
            outcome = await loop.run_in_executor(self._executor, run_decode_job, job)
        except FormatError:
            raise
        except WORKER_FAILURES as e:
            logger.warning("Decode worker failed (%s), retrying in-process", e)
            outcome = await job.run_cooperative()
        return self._report(outcome)

    def _report(self, outcome: DecodeOutcome) -> DecodeOutcome:
        logger.info(
            "Decoded mesh: %d triangles in %.1f ms (%s)",
            outcome.summary.triangle_count, outcome.elapsed_ms, outcome.executed_in,
        )
        if outcome.advisory is not None:
            logger.warning("Large mesh: %s", outcome.advisory.message)
        return outcome

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
