"""
Headless sketch session against a running p5studio server.

Usage:
    python -m p5studio.cli "draw a red circle"
    python -m p5studio.cli "a ticking clock" --model gemini-2.0-flash-thinking-exp-01-21 --auto 3
"""

import argparse
import asyncio
import logging
import sys

from p5studio.catalog import DEFAULT_MODEL
from p5studio.client import GenerationClient
from p5studio.config import configure_logging, load_settings
from p5studio.downloads import DownloadDirectory
from p5studio.editor import EditorController
from p5studio.preview import PreviewFrame

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="p5studio", description="Generate a p5.js sketch from a prompt.")
    parser.add_argument("prompt", help="What the sketch should draw")
    parser.add_argument("--server", default="http://localhost:8000", help="p5studio server URL")
    parser.add_argument("--model", default=None, help=f"Model id (default {DEFAULT_MODEL})")
    parser.add_argument("--temperature", type=float, default=None, help="Overrides the model's default")
    parser.add_argument("--auto", type=int, default=0, metavar="N", help="Regenerate N more times")
    parser.add_argument("--out", default=None, help="Directory for the code and preview files")
    return parser


async def run_session(args: argparse.Namespace) -> int:
    settings = load_settings()
    downloads = DownloadDirectory(args.out or settings.downloads_dir)
    client = GenerationClient(args.server, timeout=settings.request_timeout)
    frame = PreviewFrame(settings.p5_url, on_assign=downloads.save_preview)
    controller = EditorController(client, frame, downloads, max_auto_rounds=args.auto or None)

    controller.select_model(args.model or settings.default_model)
    if args.temperature is not None:
        controller.set_temperature(args.temperature)
    controller.set_prompt(args.prompt)
    controller.set_auto_generate(args.auto > 0)

    try:
        result = await controller.generate()
        if result is None or not result.ok:
            return 1
        if controller.auto_task is not None:
            await controller.auto_task.wait()
        path = controller.save_code()
        print(f"Saved {path} (preview: {downloads.root / 'preview.html'})")
        return 0
    finally:
        await controller.close()
        await client.aclose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(load_settings().log_level)
    return asyncio.run(run_session(args))


if __name__ == "__main__":
    sys.exit(main())
