"""Shared data models for the images optimizer."""

from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageFormat(str, Enum):
    """Output encodings, keyed by MIME type."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    WEBP = "image/webp"

    @property
    def pil_format(self) -> str:
        """Encoder name understood by Pillow."""
        return self.name

    @property
    def extension(self) -> str:
        """File extension used for archived results (the MIME subtype)."""
        return self.value.split("/")[1]

    @classmethod
    def parse(cls, value: str) -> "ImageFormat":
        """Accept a MIME type, enum name or extension ("jpg", "webp", ...)."""
        normalized = value.strip().lower()
        if normalized == "jpg":
            normalized = "jpeg"
        for member in cls:
            if normalized in (member.value, member.name.lower(), member.extension):
                return member
        raise ValueError(f"Unsupported image format: {value}")


class ItemStatus(str, Enum):
    """Lifecycle states of a batch item."""

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ItemStatus.SUCCESS, ItemStatus.ERROR)


class ProcessingSettings(BaseModel):
    """Resize and encode settings applied to a whole batch run."""

    model_config = ConfigDict(frozen=True)

    max_width: int = Field(default=0, ge=0)
    max_height: int = Field(default=0, ge=0)
    maintain_aspect_ratio: bool = True
    quality: float = Field(default=0.8, ge=0.1, le=1.0)
    format: ImageFormat = ImageFormat.JPEG

    @property
    def encoder_quality(self) -> int:
        """Quality on the 1-100 scale used by Pillow's lossy encoders."""
        return max(1, min(100, round(self.quality * 100)))


PRESETS: Dict[str, ProcessingSettings] = {
    "full-hd": ProcessingSettings(
        max_width=1920, max_height=1080, quality=0.8, format=ImageFormat.JPEG
    ),
    "thumbnail": ProcessingSettings(
        max_width=800, max_height=0, quality=0.6, format=ImageFormat.WEBP
    ),
    "compress-only": ProcessingSettings(
        max_width=0, max_height=0, quality=0.5, format=ImageFormat.JPEG
    ),
}


class BatchConfig(BaseModel):
    """Configuration for the batch scheduler and archive."""

    max_batch_size: int = Field(default=30, ge=1)
    processor: Literal["serial", "multithread"] = "serial"
    max_workers: int = Field(default=4, ge=1)
    archive_folder: str = "optimized_images"
    archive_suffix: str = "_optimized"
    debug: bool = False


class ImageInput(BaseModel):
    """A raw file buffer handed over by the input-capture collaborator."""

    name: str
    data: bytes
    mime_type: str = ""

    @property
    def declares_image(self) -> bool:
        """True unless a MIME type was declared and it is not an image type."""
        return not self.mime_type or self.mime_type.lower().startswith("image/")


class TransformOutput(BaseModel):
    """Encoded result of transforming a single image."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    format: ImageFormat

    @property
    def size(self) -> int:
        return len(self.data)


class ItemView(BaseModel):
    """Read-only snapshot of an item for presentation."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    status: ItemStatus
    error: Optional[str] = None
    input_size: int
    output_size: int = 0
    output_width: int = 0
    output_height: int = 0
    compression_ratio: int = 0


class BatchSummary(BaseModel):
    """Byte totals across a batch."""

    model_config = ConfigDict(frozen=True)

    total_input_bytes: int = 0
    total_output_bytes: int = 0
    total_saved: int = 0
    item_count: int = 0
    success_count: int = 0
    error_count: int = 0

    @property
    def saved_percent(self) -> float:
        if self.total_input_bytes <= 0:
            return 0.0
        return (self.total_saved / self.total_input_bytes) * 100.0

    def __add__(self, other: "BatchSummary") -> "BatchSummary":
        if not isinstance(other, BatchSummary):
            return NotImplemented
        return BatchSummary(
            total_input_bytes=self.total_input_bytes + other.total_input_bytes,
            total_output_bytes=self.total_output_bytes + other.total_output_bytes,
            total_saved=self.total_saved + other.total_saved,
            item_count=self.item_count + other.item_count,
            success_count=self.success_count + other.success_count,
            error_count=self.error_count + other.error_count,
        )
