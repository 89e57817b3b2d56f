"""Batch queue scheduler: admits images and drives them through the transform."""

import threading
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .processors import multithread, serial
from .processors.common import JobOutcome, TransformFunction, TransformJob
from .core.aggregator import build_archive, summarize
from .core.error_handling import BatchOperationContextManager
from .core.exceptions import BatchFullError, ItemNotFoundError, UnsupportedInputError
from .core.item import BatchItem
from .core.logging_config import get_logger
from .core.models import (
    BatchConfig,
    BatchSummary,
    ImageInput,
    ItemStatus,
    ItemView,
    ProcessingSettings,
)
from .core.observability import MetricsCollector, PerformanceMetrics
from .core.transform import transform_image

ProcessBatchFunction = Callable[..., Iterator[JobOutcome]]


class BatchScheduler:
    """
    Owns the ordered batch of items and processes them.

    Two locks guard the batch. The state lock covers every read and write of
    the item collection and item states, so observers only ever see one of
    the four item states. The run lock serializes queue runs. A run claims
    each item right before transforming it and applies the outcome only if
    the item is still present and was not reset in the meantime.
    """

    def __init__(
        self,
        settings: Optional[ProcessingSettings] = None,
        config: Optional[BatchConfig] = None,
        transform: Optional[TransformFunction] = None,
        auto_run: bool = True,
    ):
        self._settings = settings or ProcessingSettings()
        self._config = config or BatchConfig()
        self._transform = transform or transform_image
        self._auto_run = auto_run

        self._items: List[BatchItem] = []
        self._index: Dict[str, BatchItem] = {}
        self._generation = 0
        self._active_runs = 0

        self._state_lock = threading.RLock()
        self._run_lock = threading.Lock()

        self.metrics = MetricsCollector()
        self._logger = get_logger("scheduler")

    # -- read access -----------------------------------------------------

    @property
    def settings(self) -> ProcessingSettings:
        return self._settings

    @property
    def config(self) -> BatchConfig:
        return self._config

    @property
    def items(self) -> Tuple[BatchItem, ...]:
        """Snapshot of the batch in submission order."""
        with self._state_lock:
            return tuple(self._items)

    def __len__(self) -> int:
        with self._state_lock:
            return len(self._items)

    def views(self) -> List[ItemView]:
        with self._state_lock:
            return [item.view() for item in self._items]

    def get(self, item_id: str) -> BatchItem:
        with self._state_lock:
            try:
                return self._index[item_id]
            except KeyError:
                raise ItemNotFoundError(item_id) from None

    @property
    def pending_count(self) -> int:
        with self._state_lock:
            return sum(1 for item in self._items if item.status is ItemStatus.PENDING)

    @property
    def is_processing(self) -> bool:
        with self._state_lock:
            return self._active_runs > 0

    def update_settings(self, settings: ProcessingSettings) -> None:
        """Replace the settings used by the next run."""
        with self._state_lock:
            self._settings = settings
        self._logger.info(f"Settings updated: {settings.model_dump(mode='json')}")

    # -- mutation ----------------------------------------------------------

    def submit(self, inputs: Iterable[ImageInput]) -> List[str]:
        """
        Admit new images as pending items.

        The whole submission is rejected, before any change to the batch,
        when it would exceed the batch size cap or contains a buffer declared
        as a non-image type. When ``auto_run`` is set the queue is run before
        returning.

        Returns:
            Ids of the new items, in input order

        Raises:
            BatchFullError: The batch would exceed ``max_batch_size``
            UnsupportedInputError: An input is declared as a non-image type
        """
        new_inputs = list(inputs)
        limit = self._config.max_batch_size

        with self._state_lock:
            current = len(self._items)
            if current + len(new_inputs) > limit:
                self._logger.warning(
                    f"Rejected submission of {len(new_inputs)} file(s): "
                    f"{current} already queued, limit is {limit}"
                )
                raise BatchFullError(current, len(new_inputs), limit)

            rejected = [image.name for image in new_inputs if not image.declares_image]
            if rejected:
                self._logger.warning(f"Rejected non-image input(s): {', '.join(rejected)}")
                raise UnsupportedInputError(
                    f"Not an image: {', '.join(rejected)}"
                )

            new_ids = []
            for image in new_inputs:
                item = BatchItem(name=image.name, input_bytes=image.data, mime_type=image.mime_type)
                self._items.append(item)
                self._index[item.id] = item
                new_ids.append(item.id)
                self._logger.debug(f"[{item.name}] Queued as {item.id} ({item.input_size} bytes)")

        self._logger.info(f"Accepted {len(new_ids)} file(s), batch size is now {current + len(new_ids)}")

        if self._auto_run and new_ids:
            self.run_queue()
        return new_ids

    def remove(self, item_id: str) -> bool:
        """Delete an item and release its buffers. Unknown ids are a no-op."""
        with self._state_lock:
            item = self._index.pop(item_id, None)
            if item is None:
                self._logger.debug(f"Remove ignored, item {item_id} not found")
                return False
            self._items.remove(item)
            item.release()
        self._logger.info(f"[{item.name}] Removed {item_id}")
        return True

    def clear(self) -> None:
        """Remove every item and release all buffers."""
        with self._state_lock:
            count = len(self._items)
            for item in self._items:
                item.release()
            self._items.clear()
            self._index.clear()
            self._generation += 1
        self._logger.info(f"Cleared batch ({count} item(s))")

    # -- processing --------------------------------------------------------

    def _select_processor(self) -> ProcessBatchFunction:
        processors: Dict[str, ProcessBatchFunction] = {
            "serial": serial.process_batch,
            "multithread": lambda *args: multithread.process_batch(
                *args, max_workers=self._config.max_workers
            ),
        }
        return processors[self._config.processor]

    def _claim(
        self, job: TransformJob, generation: int, claimed: Dict[str, int]
    ) -> Optional[int]:
        with self._state_lock:
            if generation != self._generation:
                return None
            item = self._index.get(job.item_id)
            if item is None or item.status is not ItemStatus.PENDING:
                return None
            revision = item.start_processing()
            claimed[job.item_id] = revision
        self._logger.debug(f"[{job.name}] Processing {job.item_id}")
        return revision

    def _apply(self, outcome: JobOutcome, errors: BatchOperationContextManager) -> None:
        job, result = outcome.job, outcome.result

        self.metrics.record_metric(
            PerformanceMetrics(
                operation="transform",
                start_time=outcome.start_time,
                end_time=outcome.end_time,
                success=result.ok,
                item_name=job.name,
                input_bytes=len(job.input_bytes),
                output_bytes=result.output.size if result.ok else 0,
                error_message=result.error_message or None,
                metadata={"item_id": job.item_id, "name": job.name},
            )
        )

        with self._state_lock:
            item = self._index.get(job.item_id)
            if (
                item is None
                or item.revision != outcome.revision
                or item.status is not ItemStatus.PROCESSING
            ):
                self._logger.debug(f"[{job.name}] Discarding stale result for {job.item_id}")
                return

            if result.ok:
                item.mark_success(result.output)
            else:
                item.mark_error(result.error_message)

        if result.ok:
            self._logger.info(
                f"[{item.name}] Optimized {item.input_size} -> {item.output_size} bytes "
                f"({item.output_width}x{item.output_height})"
            )
            errors.add_success(item.name)
        else:
            errors.add_error(item.name, result.error_message)

    def run_queue(self) -> BatchSummary:
        """
        Process every pending item in batch order.

        Failures are recorded on their item and never stop the queue. Runs
        are serialized; a run that is superseded by ``reprocess_all`` or
        ``clear`` stops claiming new items.

        Returns:
            Summary of the batch after the run
        """
        with self._run_lock:
            with self._state_lock:
                generation = self._generation
                settings = self._settings
                jobs = [
                    TransformJob(item_id=item.id, name=item.name, input_bytes=item.input_bytes)
                    for item in self._items
                    if item.status is ItemStatus.PENDING and item.input_bytes is not None
                ]
                self._active_runs += 1
            claimed: Dict[str, int] = {}

            try:
                if jobs:
                    process_batch = self._select_processor()

                    def claim(job: TransformJob) -> Optional[int]:
                        return self._claim(job, generation, claimed)

                    with BatchOperationContextManager(
                        f"Processing {len(jobs)} image(s)"
                    ) as errors:
                        for outcome in process_batch(jobs, settings, self._transform, claim):
                            self._apply(outcome, errors)
                else:
                    self._logger.debug("No pending items to process")
            finally:
                stranded = self._release_unfinished(claimed)
                if stranded:
                    self._logger.warning(
                        f"Run stopped early, returned {len(stranded)} item(s) to pending: "
                        f"{', '.join(stranded)}"
                    )

        return self.summarize()

    def _release_unfinished(self, claimed: Dict[str, int]) -> List[str]:
        """Return items this run claimed but never settled to pending."""
        with self._state_lock:
            self._active_runs -= 1
            stranded = []
            for item_id, revision in claimed.items():
                item = self._index.get(item_id)
                if (
                    item is not None
                    and item.revision == revision
                    and item.status is ItemStatus.PROCESSING
                ):
                    item.reset()
                    stranded.append(item.name)
            return stranded

    def reprocess_all(self, settings: Optional[ProcessingSettings] = None) -> BatchSummary:
        """
        Reset every item to pending and run the queue again.

        Work still in flight from an earlier run is superseded: its results
        are discarded. The new run starts once the earlier run has settled.
        """
        with self._state_lock:
            if settings is not None:
                self._settings = settings
            self._generation += 1
            for item in self._items:
                item.reset()
            count = len(self._items)
        self._logger.info(f"Reprocessing {count} item(s)")
        return self.run_queue()

    # -- aggregation -------------------------------------------------------

    def summarize(self) -> BatchSummary:
        with self._state_lock:
            return summarize(self._items)

    def build_archive(self) -> Optional[bytes]:
        with self._state_lock:
            items = list(self._items)
            return build_archive(
                items,
                folder=self._config.archive_folder,
                suffix=self._config.archive_suffix,
            )
