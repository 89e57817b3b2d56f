"""Multithreaded processor implementation - uses thread pool for parallelism."""

from typing import Iterator, List
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..core import ProcessingSettings, get_logger
from .common import ClaimFunction, JobOutcome, TransformFunction, TransformJob, process_single_job


def process_batch(
    batch: List[TransformJob],
    settings: ProcessingSettings,
    transform: TransformFunction,
    claim: ClaimFunction,
    max_workers: int = 4,
) -> Iterator[JobOutcome]:
    """
    Process a batch of images using multithreading.

    Jobs are claimed inside the worker right before their transform.
    Outcomes are yielded as they complete, so their order is not the
    batch order.

    Args:
        batch: List of transform jobs to process
        settings: Processing settings captured for this run
        transform: The transform engine (pure, safe to call concurrently)
        claim: Marks a job's item as processing, or returns None to skip it
        max_workers: Upper bound on concurrent transforms

    Yields:
        Job outcomes in completion order
    """
    if not batch:
        return

    logger = get_logger("processor")
    workers = min(max_workers, len(batch))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_job = {
            executor.submit(process_single_job, job, settings, transform, claim): job
            for job in batch
        }

        for future in as_completed(future_to_job):
            try:
                outcome = future.result()
            except Exception as e:
                job = future_to_job[future]
                logger.error(f"[{job.name}] Worker failed: {e}", exc_info=True)
                continue
            if outcome is not None:
                yield outcome
