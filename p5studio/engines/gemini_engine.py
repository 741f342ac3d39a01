"""
Google Gemini engine via the google-genai SDK. Registers as "gemini".
"""

import logging

from google import genai
from google.genai import types

from p5studio.config import Settings, load_settings
from p5studio.engines.base import EngineResponse, GenerationEngine, Turn
from p5studio.engines.prompts import GENERATION_CONFIG, SYSTEM_INSTRUCTION
from p5studio.engines.registry import register

logger = logging.getLogger(__name__)


def _history_contents(history: list[Turn] | None) -> list[types.Content]:
    return [
        types.Content(role=turn.role, parts=[types.Part(text=turn.text)])
        for turn in history or []
    ]


class GeminiEngine(GenerationEngine):
    name = "Google Gemini"
    supports_models = ["google"]

    def __init__(self, client: genai.Client | None = None, settings: Settings | None = None):
        self._client = client
        self._settings = settings

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            settings = self._settings or load_settings()
            self._client = genai.Client(
                api_key=settings.require_gemini_key(),
                http_options=types.HttpOptions(timeout=int(settings.request_timeout * 1000)),
            )
        return self._client

    async def generate(
        self,
        prompt: str,
        model: str,
        temperature: float,
        history: list[Turn] | None = None,
    ) -> EngineResponse:
        config = types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=temperature,
            **GENERATION_CONFIG,
        )
        chat = self.client.aio.chats.create(
            model=model,
            config=config,
            history=_history_contents(history),
        )
        logger.info("Sending prompt to %s (temperature=%s)", model, temperature)
        response = await chat.send_message(prompt)
        return EngineResponse(text=response.text or "", model=model)


register("gemini", GeminiEngine)
