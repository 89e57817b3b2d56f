"""Fake implementations for testing purposes."""

import io
import threading
from typing import Callable, List, Optional, Set, Tuple

from PIL import Image, ImageDraw

from ..core.exceptions import DecodeError, TransformError
from ..core.image_utils import EXIF_ORIENTATION_TAG
from ..core.models import ImageInput, ProcessingSettings, TransformOutput
from ..core.transform import TransformResult


def create_test_image(
    width: int = 100,
    height: int = 100,
    image_format: str = "JPEG",
    mode: str = "RGB",
    orientation: Optional[int] = None,
) -> bytes:
    """
    Create a test image in memory.

    ``orientation`` writes an EXIF orientation tag, as phone cameras do; the
    pixels stay stored as ``width`` x ``height``.
    """
    fill = (255, 0, 0, 128) if mode == "RGBA" else "red"
    image = Image.new(mode, (width, height), color=fill)

    # Add some pattern to make it more realistic
    draw = ImageDraw.Draw(image)
    for x in range(0, width, 20):
        for y in range(0, height, 20):
            if (x + y) % 40 == 0:
                draw.rectangle([x, y, x + 9, y + 9], fill="blue")

    save_options = {"quality": 95} if image_format == "JPEG" else {}
    if orientation is not None:
        exif = Image.Exif()
        exif[EXIF_ORIENTATION_TAG] = orientation
        save_options["exif"] = exif.tobytes()

    img_bytes = io.BytesIO()
    image.save(img_bytes, format=image_format, **save_options)
    return img_bytes.getvalue()


def create_photo_image(width: int = 800, height: int = 600, quality: int = 95) -> bytes:
    """Create a noisy, photo-like JPEG that compresses noticeably when re-encoded."""
    gradient = Image.linear_gradient("L").resize((width, height))
    noise = Image.effect_noise((width, height), 48)
    texture = Image.effect_noise((width, height), 24)
    image = Image.merge("RGB", (noise, gradient, texture))

    img_bytes = io.BytesIO()
    image.save(img_bytes, format="JPEG", quality=quality)
    return img_bytes.getvalue()


def make_input(name: str = "photo.jpg", data: Optional[bytes] = None, mime_type: str = "image/jpeg") -> ImageInput:
    """Wrap bytes the way the input-capture collaborator hands them over."""
    return ImageInput(name=name, data=data if data is not None else create_test_image(), mime_type=mime_type)


class FakeTransformer:
    """Fake transform engine that records calls and fails on demand."""

    def __init__(
        self,
        size: Tuple[int, int] = (10, 10),
        fail_on: Optional[Set[bytes]] = None,
        error_factory: Callable[[str], TransformError] = DecodeError,
    ):
        self.size = size
        self.fail_on = set(fail_on or ())
        self.error_factory = error_factory
        self.calls: List[Tuple[bytes, ProcessingSettings]] = []
        self._lock = threading.Lock()

    def __call__(self, input_bytes: bytes, settings: ProcessingSettings) -> TransformResult:
        with self._lock:
            self.calls.append((input_bytes, settings))

        if input_bytes in self.fail_on:
            return TransformResult.failure(self.error_factory("Failed to load image"))

        width, height = self.size
        return TransformResult.success(
            TransformOutput(
                data=b"out:" + input_bytes[:8],
                width=width,
                height=height,
                format=settings.format,
            )
        )

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)


class BlockingTransformer(FakeTransformer):
    """Fake transform engine that holds every call until released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.started = threading.Event()
        self.release = threading.Event()

    def __call__(self, input_bytes: bytes, settings: ProcessingSettings) -> TransformResult:
        self.started.set()
        if not self.release.wait(timeout=10):
            raise TimeoutError("BlockingTransformer was never released")
        return super().__call__(input_bytes, settings)


class ExplodingTransformer:
    """Transform callable that raises instead of returning a result."""

    def __init__(self, message: str = "boom"):
        self.message = message

    def __call__(self, input_bytes: bytes, settings: ProcessingSettings) -> TransformResult:
        raise RuntimeError(self.message)
