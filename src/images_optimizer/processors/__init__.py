"""Image processors with different concurrency strategies."""

from .common import JobOutcome, TransformJob
from .serial import process_batch as serial_process_batch
from .multithread import process_batch as multithread_process_batch

__all__ = [
    "JobOutcome",
    "TransformJob",
    "serial_process_batch",
    "multithread_process_batch",
]
