"""Unit tests for batch statistics and archive packaging."""

import io
import zipfile

import pytest

from images_optimizer.core.aggregator import build_archive, format_bytes, summarize
from images_optimizer.core.item import BatchItem
from images_optimizer.core.models import BatchSummary, ImageFormat, TransformOutput


def _item(name: str, input_size: int, output_size=None, failed: bool = False, fmt=ImageFormat.JPEG):
    item = BatchItem(name=name, input_bytes=b"i" * input_size)
    if output_size is not None:
        item.start_processing()
        item.mark_success(TransformOutput(data=b"o" * output_size, width=1, height=1, format=fmt))
    elif failed:
        item.start_processing()
        item.mark_error("Failed to load image")
    return item


@pytest.fixture
def mixed_batch():
    return [
        _item("a.jpg", 1000, output_size=400),
        _item("b.png", 500, output_size=700, fmt=ImageFormat.PNG),
        _item("c.jpg", 300, failed=True),
        _item("d.jpg", 200),
    ]


class TestSummarize:
    """Tests for summarize."""

    def test_empty_batch(self):
        assert summarize([]) == BatchSummary()

    def test_totals(self, mixed_batch):
        summary = summarize(mixed_batch)

        assert summary.total_input_bytes == 2000
        # failed and pending items count at their original size
        assert summary.total_output_bytes == 400 + 700 + 300 + 200
        assert summary.total_saved == 400
        assert summary.item_count == 4
        assert summary.success_count == 2
        assert summary.error_count == 1

    def test_savings_are_not_clamped(self):
        summary = summarize([_item("big.png", 100, output_size=250)])
        assert summary.total_saved == -150
        assert summary.saved_percent == -150.0

    @pytest.mark.parametrize("split", [0, 1, 2, 3, 4])
    def test_additive_over_partitions(self, mixed_batch, split):
        whole = summarize(mixed_batch)
        parts = summarize(mixed_batch[:split]) + summarize(mixed_batch[split:])
        assert parts == whole

    def test_additive_over_interleaved_partition(self, mixed_batch):
        whole = summarize(mixed_batch)
        parts = summarize(mixed_batch[::2]) + summarize(mixed_batch[1::2])
        assert parts == whole


class TestBuildArchive:
    """Tests for build_archive."""

    def test_no_success_returns_none(self):
        batch = [_item("a.jpg", 10, failed=True), _item("b.jpg", 10)]
        assert build_archive(batch) is None

    def test_empty_batch_returns_none(self):
        assert build_archive([]) is None

    def test_contains_only_successful_items(self, mixed_batch):
        data = build_archive(mixed_batch)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.testzip() is None
            assert sorted(archive.namelist()) == [
                "optimized_images/a_optimized.jpeg",
                "optimized_images/b_optimized.png",
            ]
            assert archive.read("optimized_images/a_optimized.jpeg") == b"o" * 400

    def test_custom_folder_and_suffix(self):
        data = build_archive([_item("cat.jpg", 10, output_size=5)], folder="out", suffix="-min")
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == ["out/cat-min.jpeg"]

    def test_no_folder(self):
        data = build_archive([_item("cat.jpg", 10, output_size=5)], folder="")
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == ["cat_optimized.jpeg"]

    def test_duplicate_names_are_kept(self):
        batch = [
            _item("photo.jpg", 10, output_size=1),
            _item("photo.png", 10, output_size=2),
            _item("photo.jpeg", 10, output_size=3),
        ]
        data = build_archive(batch)
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == [
                "optimized_images/photo_optimized.jpeg",
                "optimized_images/photo_optimized (2).jpeg",
                "optimized_images/photo_optimized (3).jpeg",
            ]
            assert archive.read("optimized_images/photo_optimized (3).jpeg") == b"ooo"


class TestFormatBytes:
    """Tests for format_bytes."""

    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1048576, "1 MB"),
            (1234567, "1.18 MB"),
            (5 * 1024 ** 3, "5 GB"),
            (-2048, "-2 KB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_bytes(size) == expected

    def test_decimals(self):
        assert format_bytes(1234567, decimals=0) == "1 MB"
