"""Batch item and its processing state machine."""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import InvalidTransitionError
from .models import ImageFormat, ItemStatus, ItemView, TransformOutput


def _new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class BatchItem:
    """
    One submitted image and its processing state.

    Transitions::

        pending -> processing -> success | error
        any     -> pending        (reset)

    ``output_bytes`` is only present while the item is in ``success`` and
    ``error`` only while it is in ``error``. ``revision`` increases on every
    reset so that work started before a reset can be recognised as stale.
    """

    name: str
    input_bytes: Optional[bytes]
    mime_type: str = ""
    id: str = field(default_factory=_new_item_id)
    status: ItemStatus = ItemStatus.PENDING
    error: Optional[str] = None
    output_bytes: Optional[bytes] = field(default=None, repr=False)
    output_format: Optional[ImageFormat] = None
    output_size: int = 0
    output_width: int = 0
    output_height: int = 0
    revision: int = 0
    input_size: int = field(init=False)

    def __post_init__(self) -> None:
        self.input_size = len(self.input_bytes or b"")

    def _require(self, *allowed: ItemStatus) -> None:
        if self.status not in allowed:
            expected = ", ".join(s.value for s in allowed)
            raise InvalidTransitionError(
                f"Item {self.id} is {self.status.value}, expected {expected}"
            )

    def start_processing(self) -> int:
        """Move pending -> processing and return the revision being worked on."""
        self._require(ItemStatus.PENDING)
        if self.input_bytes is None:
            raise InvalidTransitionError(f"Item {self.id} has been released")
        self.status = ItemStatus.PROCESSING
        return self.revision

    def mark_success(self, output: TransformOutput) -> None:
        """Move processing -> success and take ownership of the encoded output."""
        self._require(ItemStatus.PROCESSING)
        self.output_bytes = output.data
        self.output_format = output.format
        self.output_size = len(output.data)
        self.output_width = output.width
        self.output_height = output.height
        self.error = None
        self.status = ItemStatus.SUCCESS

    def mark_error(self, message: str) -> None:
        """Move processing -> error, recording a human readable summary."""
        self._require(ItemStatus.PROCESSING)
        self._drop_output()
        self.error = message or "Processing failed"
        self.status = ItemStatus.ERROR

    def reset(self) -> None:
        """Return the item to pending, discarding any previous output."""
        self._drop_output()
        self.error = None
        self.status = ItemStatus.PENDING
        self.revision += 1

    def release(self) -> None:
        """Drop every buffer the item owns (removal or clear)."""
        self._drop_output()
        self.input_bytes = None
        self.revision += 1

    def _drop_output(self) -> None:
        self.output_bytes = None
        self.output_format = None
        self.output_size = 0
        self.output_width = 0
        self.output_height = 0

    @property
    def stem(self) -> str:
        """File name up to its first dot."""
        return self.name.split(".")[0] or "image"

    def archive_name(self, suffix: str = "_optimized") -> str:
        """Name of the item's result inside an archive, e.g. ``photo_optimized.jpeg``."""
        if self.output_format is None:
            raise InvalidTransitionError(f"Item {self.id} has no output to name")
        return f"{self.stem}{suffix}.{self.output_format.extension}"

    @property
    def compression_ratio(self) -> int:
        """Percentage saved, rounded; 0 until there is an output."""
        if not self.output_size or not self.input_size:
            return 0
        return round(((self.input_size - self.output_size) / self.input_size) * 100)

    def view(self) -> ItemView:
        return ItemView(
            id=self.id,
            name=self.name,
            status=self.status,
            error=self.error,
            input_size=self.input_size,
            output_size=self.output_size,
            output_width=self.output_width,
            output_height=self.output_height,
            compression_ratio=self.compression_ratio,
        )
