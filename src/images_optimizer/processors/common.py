"""Common functions shared across all processor implementations."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..core import ProcessingSettings, TransformResult, get_logger
from ..core.exceptions import TransformError

TransformFunction = Callable[[bytes, ProcessingSettings], TransformResult]


@dataclass(frozen=True)
class TransformJob:
    """Snapshot of a pending item handed to a processor."""

    item_id: str
    name: str
    input_bytes: bytes


@dataclass(frozen=True)
class JobOutcome:
    """A finished transform together with the item revision it was claimed at."""

    job: TransformJob
    revision: int
    result: TransformResult
    start_time: float
    end_time: float


# Returns the claimed revision, or None when the job must be skipped
ClaimFunction = Callable[[TransformJob], Optional[int]]


def process_single_job(
    job: TransformJob,
    settings: ProcessingSettings,
    transform: TransformFunction,
    claim: ClaimFunction,
) -> Optional[JobOutcome]:
    """Claim a job and run its transform: Claim -> Decode -> Resize -> Encode."""
    logger = get_logger("processor")

    revision = claim(job)
    if revision is None:
        logger.debug(f"[{job.name}] Skipped, item no longer pending")
        return None

    start_time = time.time()
    try:
        result = transform(job.input_bytes, settings)
    except Exception as e:  # noqa: BLE001
        # A transform callable must not leave the item stuck in processing
        logger.error(f"[{job.name}] Unexpected transform failure: {e}", exc_info=True)
        result = TransformResult.failure(TransformError(f"Processing failed: {e}"))
    end_time = time.time()

    if result.ok:
        logger.debug(f"[{job.name}] Transform completed in {(end_time - start_time) * 1000:.1f}ms")
    else:
        logger.debug(f"[{job.name}] Transform failed: {result.error_message}")

    return JobOutcome(
        job=job,
        revision=revision,
        result=result,
        start_time=start_time,
        end_time=end_time,
    )
