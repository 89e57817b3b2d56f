"""Custom exceptions for the images optimizer."""

from __future__ import annotations


class ImagesOptimizerError(Exception):
    """Base exception for all images optimizer errors."""


class ConfigurationError(ImagesOptimizerError):
    """Error raised for invalid configuration options."""


class BatchFullError(ImagesOptimizerError):
    """Raised when a submission would push the batch over its size cap.

    The whole submission is rejected and the batch is left untouched.
    """

    def __init__(self, current: int, requested: int, limit: int):
        self.current = current
        self.requested = requested
        self.limit = limit
        super().__init__(
            f"You can only process up to {limit} files at once "
            f"({current} queued, {requested} submitted). "
            "Please remove some files first."
        )


class UnsupportedInputError(ImagesOptimizerError):
    """Raised when a submitted buffer is declared as something other than an image."""


class ItemNotFoundError(ImagesOptimizerError, KeyError):
    """Raised when an item id is no longer present in the batch."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class InvalidTransitionError(ImagesOptimizerError):
    """Raised when an item is driven through a transition its state forbids."""


class TransformError(ImagesOptimizerError):
    """Error raised when transforming a single image fails."""


class DecodeError(TransformError):
    """The input buffer is not a readable image."""


class EncodeError(TransformError):
    """Resampling or encoding produced no usable output."""
