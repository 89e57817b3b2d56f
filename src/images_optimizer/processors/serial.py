"""Serial processor implementation - processes images one by one."""

from typing import Iterator, List

from ..core import ProcessingSettings
from .common import ClaimFunction, JobOutcome, TransformFunction, TransformJob, process_single_job


def process_batch(
    batch: List[TransformJob],
    settings: ProcessingSettings,
    transform: TransformFunction,
    claim: ClaimFunction,
) -> Iterator[JobOutcome]:
    """
    Processes a batch of images serially, one by one, in the current thread.

    Each job is claimed immediately before its transform, so at most one
    item is in flight at a time and outcomes are yielded in batch order.

    Args:
        batch: A list of `TransformJob` snapshots to process.
        settings: `ProcessingSettings` captured for this run.
        transform: The transform engine to call per image.
        claim: Marks a job's item as processing, or returns None to skip it.

    Yields:
        A `JobOutcome` for every job that was claimed.
    """
    for job in batch:
        outcome = process_single_job(job, settings, transform, claim)
        if outcome is not None:
            yield outcome
