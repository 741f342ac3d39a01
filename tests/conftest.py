"""Pytest fixtures (mock engine, download directory)."""
import pytest

from p5studio.downloads import DownloadDirectory
from p5studio.engines.base import EngineResponse, GenerationEngine
from p5studio.engines.registry import register


class MockEngine(GenerationEngine):
    """Engine that returns a canned reply (no LLM). Used for API tests."""
    name = "Mock"
    supports_models = ["google"]

    reply = "```javascript\nfunction setup() {\n  createCanvas(400, 400);\n}\n```"
    error: Exception | None = None
    calls: list = []

    async def generate(self, prompt, model, temperature, history=None):
        MockEngine.calls.append(
            {"prompt": prompt, "model": model, "temperature": temperature, "history": history}
        )
        if MockEngine.error is not None:
            raise MockEngine.error
        return EngineResponse(text=MockEngine.reply, model=model)


register("mock", MockEngine)


@pytest.fixture
def mock_engine():
    """Reset the mock engine's canned reply and call log."""
    MockEngine.reply = "```javascript\nfunction setup() {\n  createCanvas(400, 400);\n}\n```"
    MockEngine.error = None
    MockEngine.calls = []
    yield MockEngine
    MockEngine.error = None


@pytest.fixture
def downloads(tmp_path):
    return DownloadDirectory(tmp_path / "downloads")
