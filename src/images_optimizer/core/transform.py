"""Transform engine: decode, resize and re-encode one image."""

from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import TransformError
from .geometry import resolve_dimensions
from .image_utils import decode_dimensions, decode_image, encode_image, resample_image
from .logging_config import get_logger
from .models import ProcessingSettings, TransformOutput


@dataclass(frozen=True)
class TransformResult:
    """Outcome of a transform: exactly one of ``output`` or ``error`` is set."""

    output: Optional[TransformOutput] = None
    error: Optional[TransformError] = None

    def __post_init__(self) -> None:
        if (self.output is None) == (self.error is None):
            raise ValueError("TransformResult needs exactly one of output or error")

    @property
    def ok(self) -> bool:
        return self.output is not None

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error is not None else ""

    @classmethod
    def success(cls, output: TransformOutput) -> "TransformResult":
        return cls(output=output)

    @classmethod
    def failure(cls, error: TransformError) -> "TransformResult":
        return cls(error=error)


def transform_image(input_bytes: bytes, settings: ProcessingSettings) -> TransformResult:
    """
    Decode ``input_bytes``, resize per ``settings`` and re-encode.

    Per-image failures are returned as a failed ``TransformResult`` carrying a
    ``DecodeError`` or ``EncodeError``; they are never raised. All working
    buffers are local to the call.
    """
    logger = get_logger("transform")

    try:
        image = decode_image(input_bytes)
        logger.debug(f"Decoded image {image.size[0]}x{image.size[1]} ({image.mode})")

        width, height = resolve_dimensions(image.width, image.height, settings)
        resized = resample_image(image, (width, height))

        data = encode_image(resized, settings.format, settings.encoder_quality)
    except TransformError as e:
        return TransformResult.failure(e)

    logger.debug(
        f"Encoded {settings.format.name} {width}x{height}: "
        f"{len(input_bytes)} -> {len(data)} bytes"
    )
    return TransformResult.success(
        TransformOutput(data=data, width=width, height=height, format=settings.format)
    )


def probe_dimensions(input_bytes: bytes) -> Tuple[int, int]:
    """
    Return the pixel size of an encoded image without a full decode.

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    return decode_dimensions(input_bytes)
