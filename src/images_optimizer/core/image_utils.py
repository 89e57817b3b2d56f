"""Pillow helpers for decoding, resampling and encoding images."""

import io
from typing import Tuple

from PIL import Image, ImageOps

from .error_handling import with_error_handling
from .exceptions import EncodeError
from .models import ImageFormat

RESAMPLE_FILTER = Image.Resampling.LANCZOS

EXIF_ORIENTATION_TAG = 0x0112
# Orientations that swap width and height (90 and 270 degree variants)
TRANSPOSED_ORIENTATIONS = (5, 6, 7, 8)

# Background used when flattening transparency for encoders without alpha
JPEG_BACKGROUND = (255, 255, 255)

# Modes the PNG encoder writes as they are, 16-bit grayscale included
PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I;16", "I;16B")


@with_error_handling
def decode_image(image_bytes: bytes) -> "Image.Image":
    """
    Decode an encoded image fully into memory, upright.

    The EXIF orientation tag is applied, so the pixels come back the way a
    browser displays the image.

    Args:
        image_bytes: Raw encoded image data

    Returns:
        Loaded PIL Image

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    image = Image.open(io.BytesIO(image_bytes))
    image.load()
    return ImageOps.exif_transpose(image)


@with_error_handling
def decode_dimensions(image_bytes: bytes) -> Tuple[int, int]:
    """Read the displayed pixel size from the image header without decoding pixels."""
    with Image.open(io.BytesIO(image_bytes)) as image:
        width, height = image.size
        if image.getexif().get(EXIF_ORIENTATION_TAG) in TRANSPOSED_ORIENTATIONS:
            return height, width
        return width, height


@with_error_handling
def resample_image(img: "Image.Image", size: Tuple[int, int]) -> "Image.Image":
    """
    Resize an image with a high-quality filter.

    Returns the image untouched when it already has the requested size.
    """
    if img.size == size:
        return img
    if img.mode in ("P", "1"):
        # Palette images cannot be filtered; expand first
        img = img.convert("RGBA" if "transparency" in img.info else "RGB")
    elif img.mode.startswith("I;16"):
        img = img.convert("I")
    return img.resize(size, RESAMPLE_FILTER)


def prepare_for_format(img: "Image.Image", image_format: ImageFormat) -> "Image.Image":
    """
    Convert an image to a mode the target encoder accepts.

    JPEG has no alpha channel, so transparent images are composited on white.
    PNG and WebP keep transparency.
    """
    has_alpha = img.mode in ("RGBA", "LA", "PA") or (
        img.mode == "P" and "transparency" in img.info
    )

    wide_gray = img.mode in ("I", "F") or img.mode.startswith("I;16")
    if wide_gray and image_format is not ImageFormat.PNG:
        # 8-bit encoders: scale the 16-bit range down to L
        img = img.convert("I").point(lambda v: v * (1 / 256)).convert("L")

    if image_format is ImageFormat.JPEG:
        if has_alpha:
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, JPEG_BACKGROUND)
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
        if img.mode not in ("RGB", "L", "CMYK"):
            return img.convert("RGB")
        return img

    if image_format is ImageFormat.WEBP:
        if img.mode not in ("RGB", "RGBA"):
            return img.convert("RGBA" if has_alpha else "RGB")
        return img

    # PNG
    if img.mode in PNG_MODES:
        return img
    if img.mode == "F" or img.mode.startswith("I;16"):
        img = img.convert("I")
    if img.mode == "I":
        return img.convert("I;16")
    if has_alpha:
        return img.convert("RGBA")
    return img.convert("RGB")


@with_error_handling
def encode_image(
    img: "Image.Image", image_format: ImageFormat, quality: int
) -> bytes:
    """
    Encode an image to the requested format.

    Args:
        img: PIL Image to encode
        image_format: Target encoding
        quality: 1-100 quality for lossy encoders, ignored for PNG

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the encoder fails or produces no output
    """
    prepared = prepare_for_format(img, image_format)
    output_stream = io.BytesIO()

    if image_format is ImageFormat.JPEG:
        prepared.save(
            output_stream, format=image_format.pil_format, quality=quality, optimize=True
        )
    elif image_format is ImageFormat.WEBP:
        prepared.save(output_stream, format=image_format.pil_format, quality=quality)
    else:
        prepared.save(output_stream, format=image_format.pil_format, optimize=True)

    data = output_stream.getvalue()
    if not data:
        raise EncodeError(f"{image_format.name} encoder produced no output")
    return data
