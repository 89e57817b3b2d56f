"""Core utilities and shared components for the images optimizer."""

from .logging_config import (
    get_logger,
    set_debug,
    setup_logger,
)
from .exceptions import (
    BatchFullError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    ImagesOptimizerError,
    InvalidTransitionError,
    ItemNotFoundError,
    TransformError,
    UnsupportedInputError,
)
from .models import (
    PRESETS,
    BatchConfig,
    BatchSummary,
    ImageFormat,
    ImageInput,
    ItemStatus,
    ItemView,
    ProcessingSettings,
    TransformOutput,
)
from .geometry import needs_resize, resolve_dimensions
from .transform import TransformResult, probe_dimensions, transform_image
from .item import BatchItem
from .aggregator import build_archive, format_bytes, summarize

__all__ = [
    "PRESETS",
    "BatchConfig",
    "BatchItem",
    "BatchSummary",
    "ImageFormat",
    "ImageInput",
    "ItemStatus",
    "ItemView",
    "ProcessingSettings",
    "TransformOutput",
    "TransformResult",
    "build_archive",
    "format_bytes",
    "needs_resize",
    "probe_dimensions",
    "resolve_dimensions",
    "summarize",
    "transform_image",
    "setup_logger",
    "get_logger",
    "set_debug",
    "ImagesOptimizerError",
    "BatchFullError",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "InvalidTransitionError",
    "ItemNotFoundError",
    "TransformError",
    "UnsupportedInputError",
]
