"""Tests for p5studio.downloads."""
import base64
from datetime import datetime, timezone

import pytest

from p5studio.downloads import DownloadDirectory, timestamp


def test_timestamp_format():
    now = datetime(2025, 2, 14, 9, 30, 5, 123000, tzinfo=timezone.utc)
    assert timestamp(now) == "2025-02-14T09-30-05"


def test_save_code(downloads):
    path = downloads.save_code("circle(1, 2, 3);")
    assert path.name.startswith("p5js-sketch-")
    assert path.suffix == ".js"
    assert path.read_text() == "circle(1, 2, 3);"


def test_save_code_never_overwrites(downloads):
    first = downloads.save_code("a")
    second = downloads.save_code("b")
    # same second or not, both files survive
    assert first != second
    assert first.read_text() == "a"
    assert second.read_text() == "b"


def test_save_screenshot(downloads):
    data_url = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()
    path = downloads.save_screenshot(data_url)
    assert path.suffix == ".png"
    assert path.read_bytes() == b"png-bytes"


def test_save_screenshot_rejects_other_data(downloads):
    with pytest.raises(ValueError):
        downloads.save_screenshot("data:text/plain,hello")


def test_save_preview(tmp_path):
    downloads = DownloadDirectory(tmp_path / "out")
    path = downloads.save_preview("<html></html>")
    assert path == tmp_path / "out" / "preview.html"
    assert path.read_text() == "<html></html>"
