"""Batch statistics and archive packaging."""

import io
import zipfile
from typing import Iterable, Optional, Set

from .item import BatchItem
from .logging_config import get_logger
from .models import BatchSummary, ItemStatus

BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def summarize(items: Iterable[BatchItem]) -> BatchSummary:
    """
    Compute byte totals for a collection of items.

    Items that did not succeed count at their original size in the output
    total. ``total_saved`` is negative when re-encoding grew the batch.
    """
    total_input = 0
    total_output = 0
    item_count = 0
    success_count = 0
    error_count = 0

    for item in items:
        item_count += 1
        total_input += item.input_size
        if item.status is ItemStatus.SUCCESS:
            success_count += 1
            total_output += item.output_size
        else:
            if item.status is ItemStatus.ERROR:
                error_count += 1
            total_output += item.input_size

    return BatchSummary(
        total_input_bytes=total_input,
        total_output_bytes=total_output,
        total_saved=total_input - total_output,
        item_count=item_count,
        success_count=success_count,
        error_count=error_count,
    )


def _unique_name(name: str, taken: Set[str]) -> str:
    if name not in taken:
        return name
    base, dot, extension = name.rpartition(".")
    counter = 2
    while True:
        candidate = f"{base} ({counter}){dot}{extension}"
        if candidate not in taken:
            return candidate
        counter += 1


def build_archive(
    items: Iterable[BatchItem],
    folder: str = "optimized_images",
    suffix: str = "_optimized",
) -> Optional[bytes]:
    """
    Package every successfully processed item into a ZIP archive.

    Args:
        items: Items to consider, in batch order
        folder: Directory inside the archive holding the results
        suffix: Appended to each original file stem

    Returns:
        The archive bytes, or None when no item succeeded
    """
    logger = get_logger("archive")
    eligible = [
        item
        for item in items
        if item.status is ItemStatus.SUCCESS and item.output_bytes is not None
    ]

    if not eligible:
        logger.info("No processed images to archive")
        return None

    prefix = f"{folder.strip('/')}/" if folder.strip("/") else ""
    taken: Set[str] = set()
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for item in eligible:
            entry_name = _unique_name(item.archive_name(suffix), taken)
            taken.add(entry_name)
            archive.writestr(prefix + entry_name, item.output_bytes)
            logger.debug(f"Archived {item.name} as {prefix}{entry_name}")

    logger.info(f"Archived {len(eligible)} image(s)")
    return buffer.getvalue()


def format_bytes(size: int, decimals: int = 2) -> str:
    """Format a byte count for display, e.g. ``1.5 KB``."""
    if size == 0:
        return "0 Bytes"

    sign = "-" if size < 0 else ""
    value = float(abs(size))
    index = 0
    while value >= 1024 and index < len(BYTE_UNITS) - 1:
        value /= 1024
        index += 1

    text = f"{value:.{max(0, decimals)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{sign}{text} {BYTE_UNITS[index]}"
