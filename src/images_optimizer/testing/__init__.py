"""Testing utilities and fakes for the images optimizer."""

from .fakes import (
    BlockingTransformer,
    ExplodingTransformer,
    FakeTransformer,
    create_photo_image,
    create_test_image,
    make_input,
)

__all__ = [
    "BlockingTransformer",
    "ExplodingTransformer",
    "FakeTransformer",
    "create_photo_image",
    "create_test_image",
    "make_input",
]
