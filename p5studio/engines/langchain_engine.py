"""
LangChain engine adapter; model-agnostic via LangChain chat models.
Registers as "langchain".
"""

import logging

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from p5studio.config import Settings, load_settings
from p5studio.engines.base import EngineResponse, GenerationEngine, Turn
from p5studio.engines.prompts import GENERATION_CONFIG, SYSTEM_INSTRUCTION
from p5studio.engines.registry import register

logger = logging.getLogger(__name__)

MAX_TOKENS = GENERATION_CONFIG["max_output_tokens"]


def _get_model(model: str, temperature: float, settings: Settings) -> BaseChatModel:
    """Return a LangChain chat model. Google (gemini-*), Anthropic (claude-*), or OpenAI."""
    name = model.lower()
    if name.startswith("gemini"):
        from langchain_google_genai import ChatGoogleGenerativeAI
        return ChatGoogleGenerativeAI(
            model=name,
            google_api_key=settings.require_gemini_key(),
            temperature=temperature,
            top_p=GENERATION_CONFIG["top_p"],
            top_k=GENERATION_CONFIG["top_k"],
            max_output_tokens=MAX_TOKENS,
        )
    if name.startswith("claude"):
        from langchain_anthropic import ChatAnthropic
        return ChatAnthropic(model=name, temperature=temperature, max_tokens=MAX_TOKENS)
    from langchain_openai import ChatOpenAI
    return ChatOpenAI(model=name, temperature=temperature, max_tokens=MAX_TOKENS)


def _to_messages(prompt: str, history: list[Turn] | None) -> list:
    messages = [SystemMessage(content=SYSTEM_INSTRUCTION)]
    for turn in history or []:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    messages.append(HumanMessage(content=prompt))
    return messages


class LangChainEngine(GenerationEngine):
    name = "LangChain"
    supports_models = ["google", "anthropic", "openai"]

    def __init__(self, settings: Settings | None = None):
        self._settings = settings

    async def generate(
        self,
        prompt: str,
        model: str,
        temperature: float,
        history: list[Turn] | None = None,
    ) -> EngineResponse:
        llm = _get_model(model, temperature, self._settings or load_settings())
        logger.info("Sending prompt to %s via LangChain (temperature=%s)", model, temperature)
        result = await llm.ainvoke(_to_messages(prompt, history))
        text = result.content
        if not isinstance(text, str):
            # Some providers return a list of content parts
            text = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in text
            )
        return EngineResponse(text=text, model=model)


register("langchain", LangChainEngine)
