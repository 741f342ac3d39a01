"""
Save-to-disk counterparts of the browser download buttons.
"""

import base64
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

FILE_PREFIX = "p5js-sketch"
DATA_URL_PREFIX = "data:image/png;base64,"


def timestamp(now: datetime | None = None) -> str:
    """UTC timestamp safe for file names, e.g. 2025-02-14T09-30-05."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S")


class DownloadDirectory:
    """Writes sketch code and screenshots with timestamped names into one directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _target(self, suffix: str) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        stem = f"{FILE_PREFIX}-{timestamp()}"
        path = self.root / f"{stem}{suffix}"
        n = 1
        while path.exists():
            path = self.root / f"{stem}-{n}{suffix}"
            n += 1
        return path

    def save_code(self, code: str) -> Path:
        path = self._target(".js")
        path.write_text(code, encoding="utf-8")
        logger.info("Saved code to %s", path)
        return path

    def save_screenshot(self, data_url: str) -> Path:
        """Decode a PNG data URL posted back by the preview frame."""
        if not data_url.startswith(DATA_URL_PREFIX):
            raise ValueError("Screenshot is not a base64 PNG data URL")
        data = base64.b64decode(data_url[len(DATA_URL_PREFIX):], validate=True)
        path = self._target(".png")
        path.write_bytes(data)
        logger.info("Saved screenshot to %s", path)
        return path

    def save_preview(self, html: str, name: str = "preview.html") -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / name
        path.write_text(html, encoding="utf-8")
        return path
