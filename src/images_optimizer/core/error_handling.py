# src/images_optimizer/core/error_handling.py

import functools
import logging
import time

from PIL import Image, UnidentifiedImageError as PILUnidentifiedImageError

from .exceptions import DecodeError, EncodeError, TransformError

# Errors Pillow raises for unreadable or malformed image data
PIL_DECODE_ERRORS = (
    PILUnidentifiedImageError,
    Image.DecompressionBombError,
    SyntaxError,
    OSError,
    ValueError,
)


def with_error_handling(func):
    """
    A decorator to wrap image helpers with standardized error handling.

    Pillow errors are translated into the transform error taxonomy: failures
    while decoding become ``DecodeError``, failures anywhere else become
    ``EncodeError``. Translated errors get a one-line warning, the traceback
    only at debug level. Anything left untranslated is logged with its
    traceback and re-raised.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except TransformError:
            raise
        except Exception as e:
            if isinstance(e, PILUnidentifiedImageError):
                error = DecodeError(f"Failed to identify image in {func.__name__}: {e}")
            elif func.__name__.startswith('decode') and isinstance(e, PIL_DECODE_ERRORS):
                error = DecodeError(f"Failed to load image in {func.__name__}: {e}")
            elif func.__name__.startswith(('encode', 'resample')):
                error = EncodeError(f"Image encoding error in {func.__name__}: {e}")
            else:
                logger.error(
                    f"Error in '{func.__name__}': {e}",
                    exc_info=True
                )
                raise
            logger.warning(f"Error in '{func.__name__}': {e}")
            logger.debug(f"Traceback for '{func.__name__}'", exc_info=True)
            raise error from e
    return wrapper


class BatchOperationContextManager:
    """
    Collects per-item outcomes of one queue run and logs a report on exit.

    Failed items are reported through ``add_error`` and never abort the run.
    Any other exception raised inside the block is logged and propagates.
    """
    def __init__(self, operation_name="Batch run"):
        self.operation_name = operation_name
        self.succeeded = []
        self.failures = []
        self._started = None
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self._started = time.monotonic()
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.monotonic() - self._started
        if exc_type:
            self.logger.error(
                f"{self.operation_name} aborted after {elapsed:.2f}s: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
            return False

        if self.failures:
            self.logger.warning(
                f"{self.operation_name} finished in {elapsed:.2f}s: "
                f"{len(self.succeeded)} optimized, {len(self.failures)} failed."
            )
            for name, message in self.failures:
                self.logger.error(f"  {name}: {message}")
        else:
            self.logger.info(
                f"{self.operation_name} finished in {elapsed:.2f}s: "
                f"{len(self.succeeded)} optimized."
            )
        return False

    @property
    def error_count(self) -> int:
        return len(self.failures)

    def add_success(self, item_name: str):
        self.succeeded.append(item_name)

    def add_error(self, item_name: str, error):
        """Record a failed item; ``error`` may be a message or an exception."""
        self.failures.append((item_name, str(error)))
        self.logger.debug(f"[{item_name}] Failed in {self.operation_name}: {error}")
