"""Output dimension rules for resizing."""

import math
from typing import Tuple

from .models import ProcessingSettings


def resolve_dimensions(
    input_width: int, input_height: int, settings: ProcessingSettings
) -> Tuple[int, int]:
    """
    Compute the output size of an image under the given settings.

    With ``maintain_aspect_ratio`` the width limit is applied first and the
    height limit second, on the already-scaled height. Without it each
    non-zero limit replaces its dimension independently. Zero limits leave
    the dimension alone. Results are floored and never smaller than 1x1.

    Args:
        input_width: Width of the decoded image in pixels
        input_height: Height of the decoded image in pixels
        settings: Batch processing settings

    Returns:
        Tuple of (width, height) in pixels
    """
    width: float = input_width
    height: float = input_height

    if settings.maintain_aspect_ratio:
        if settings.max_width > 0 and width > settings.max_width:
            height = (height * settings.max_width) / width
            width = settings.max_width
        if settings.max_height > 0 and height > settings.max_height:
            width = (width * settings.max_height) / height
            height = settings.max_height
    else:
        if settings.max_width > 0:
            width = settings.max_width
        if settings.max_height > 0:
            height = settings.max_height

    return max(1, math.floor(width)), max(1, math.floor(height))


def needs_resize(
    input_width: int, input_height: int, settings: ProcessingSettings
) -> bool:
    """Return True when the settings change the image's pixel dimensions."""
    return resolve_dimensions(input_width, input_height, settings) != (
        input_width,
        input_height,
    )
