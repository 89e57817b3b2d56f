#!/usr/bin/env python3
"""
Batch Image Optimizer CLI

Reads images → Resizes/Re-encodes → Writes a ZIP archive (or individual files)
Supports serial and multithreaded processing strategies
"""

import sys
import argparse
import mimetypes
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .core import (
    PRESETS,
    BatchConfig,
    BatchFullError,
    ConfigurationError,
    ImageFormat,
    ImageInput,
    ImagesOptimizerError,
    ItemStatus,
    ProcessingSettings,
    format_bytes,
    get_logger,
    set_debug,
)
from .scheduler import BatchScheduler


def build_parser() -> argparse.ArgumentParser:
    """
    Builds the argument parser for the batch image optimizer.

    Defines the `version` and `process` subcommands. `process` takes the
    input files plus resize, quality, format and processing-strategy options.

    Returns:
        The configured `argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="images-optimizer",
        description="Resize and compress a batch of images",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("version", help="Show version information")

    process = subparsers.add_parser("process", help="Optimize a batch of images")
    process.add_argument("files", nargs="+", help="Image files to optimize")
    process.add_argument(
        "--output",
        default="optimized_images.zip",
        help="Path of the ZIP archive to write (default: optimized_images.zip)",
    )
    process.add_argument(
        "--output-dir",
        default=None,
        help="Write optimized files into this directory instead of a ZIP archive",
    )
    process.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Start from a preset; explicit options override it",
    )
    process.add_argument("--max-width", type=int, default=None, help="Maximum width, 0 for no limit")
    process.add_argument("--max-height", type=int, default=None, help="Maximum height, 0 for no limit")
    process.add_argument(
        "--no-aspect-ratio",
        action="store_true",
        help="Stretch to the given width/height instead of keeping proportions",
    )
    process.add_argument(
        "--quality", type=float, default=None, help="Quality from 0.1 to 1.0 (default: 0.8)"
    )
    process.add_argument(
        "--format",
        type=str,
        default=None,
        choices=["jpeg", "png", "webp"],
        help="Output format (default: jpeg)",
    )
    process.add_argument(
        "--processor",
        type=str,
        default="serial",
        choices=["serial", "multithread"],
        help="Processing strategy to use (default: serial)",
    )
    process.add_argument("--workers", type=int, default=4, help="Threads for the multithread processor")
    process.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def settings_from_args(args: argparse.Namespace) -> ProcessingSettings:
    """
    Merge preset and explicit options into `ProcessingSettings`.

    Raises:
        ConfigurationError: If an option is out of range
    """
    base = PRESETS[args.preset] if args.preset else ProcessingSettings()
    overrides = {}
    if args.max_width is not None:
        overrides["max_width"] = args.max_width
    if args.max_height is not None:
        overrides["max_height"] = args.max_height
    if args.no_aspect_ratio:
        overrides["maintain_aspect_ratio"] = False
    if args.quality is not None:
        overrides["quality"] = args.quality
    try:
        if args.format is not None:
            overrides["format"] = ImageFormat.parse(args.format)
        return ProcessingSettings.model_validate({**base.model_dump(), **overrides})
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid processing options: {e}") from e


def read_inputs(paths: List[str]) -> List[ImageInput]:
    """Read files from disk into `ImageInput` buffers."""
    inputs = []
    for raw_path in paths:
        path = Path(raw_path)
        mime_type, _ = mimetypes.guess_type(path.name)
        inputs.append(ImageInput(name=path.name, data=path.read_bytes(), mime_type=mime_type or ""))
    return inputs


def write_results(scheduler: BatchScheduler, args: argparse.Namespace) -> int:
    """Write the archive or individual files; returns the number written."""
    logger = get_logger("cli")

    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        written = 0
        for item in scheduler.items:
            if item.status is ItemStatus.SUCCESS:
                target = output_dir / item.archive_name(scheduler.config.archive_suffix)
                target.write_bytes(item.output_bytes)
                logger.info(f"Wrote {target}")
                written += 1
        return written

    archive = scheduler.build_archive()
    if archive is None:
        logger.warning("Nothing to archive, no image was processed successfully")
        return 0
    Path(args.output).write_bytes(archive)
    logger.info(f"Wrote archive {args.output} ({format_bytes(len(archive))})")
    return scheduler.summarize().success_count


def log_final_statistics(scheduler: BatchScheduler) -> None:
    """Log per-item results and batch totals."""
    logger = get_logger("cli")
    summary = scheduler.summarize()

    logger.info("=" * 80)
    logger.info("PROCESSING COMPLETED")
    logger.info("=" * 80)
    for view in scheduler.views():
        if view.status is ItemStatus.SUCCESS:
            logger.info(
                f"  {view.name}: {format_bytes(view.input_size)} -> {format_bytes(view.output_size)} "
                f"({view.output_width}x{view.output_height}, -{view.compression_ratio}%)"
            )
        else:
            logger.info(f"  {view.name}: {view.status.value} {view.error or ''}".rstrip())
    logger.info(f"  Original total:  {format_bytes(summary.total_input_bytes)}")
    logger.info(f"  Optimized total: {format_bytes(summary.total_output_bytes)}")
    logger.info(f"  Saved:           {format_bytes(summary.total_saved)} ({summary.saved_percent:.1f}%)")
    logger.info(f"  Succeeded: {summary.success_count}  Failed: {summary.error_count}")

    timing = scheduler.metrics.get_summary("transform")
    if timing:
        logger.info(
            f"  Transform time: avg {timing['avg_duration'] * 1000:.1f}ms, "
            f"slowest {timing['slowest_item']} ({timing['max_duration'] * 1000:.1f}ms), "
            f"{format_bytes(timing['bytes_per_second'])}/s"
        )
    logger.info("=" * 80)


def run_process(args: argparse.Namespace) -> int:
    """Run the `process` subcommand and return the exit code."""
    logger = get_logger("cli")

    try:
        settings = settings_from_args(args)
        config = BatchConfig(processor=args.processor, max_workers=args.workers, debug=args.debug)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except ValidationError as e:
        logger.error(f"Invalid batch options: {e}")
        return 1

    if config.debug:
        set_debug(True)

    logger.info(f"Settings: {settings.model_dump(mode='json')}")
    scheduler = BatchScheduler(settings=settings, config=config)

    try:
        scheduler.submit(read_inputs(args.files))
    except BatchFullError as e:
        logger.error(str(e))
        return 1
    except (OSError, ImagesOptimizerError) as e:
        logger.error(f"Could not queue files: {e}")
        return 1

    log_final_statistics(scheduler)
    written = write_results(scheduler, args)
    return 0 if written > 0 else 1


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the batch image optimizer.

    Parses arguments and dispatches to the requested subcommand. Prints help
    and exits with 1 when no subcommand is given.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print("Images Optimizer CLI")
        print(f"Version {__version__}")
        print("Batch image resizing and compression")
        sys.exit(0)
        return

    if args.command != "process":
        parser.print_help()
        sys.exit(1)
        return

    try:
        sys.exit(run_process(args))
    except KeyboardInterrupt:
        logger = get_logger("cli")
        logger.warning("Processing interrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
