"""Models offered in the editor's selector and their default temperatures."""

DEFAULT_MODEL = "gemini-2.0-flash"

MODELS = [
    {"id": "gemini-2.0-flash", "name": "Gemini 2.0 Flash"},
    {"id": "gemini-2.0-pro-exp-02-05", "name": "Gemini 2.0 Pro"},
    {"id": "gemini-2.0-flash-thinking-exp-01-21", "name": "Gemini 2.0 Flash Thinking"},
]

REASONING_MARKER = "thinking"
REASONING_TEMPERATURE = 0.7
DEFAULT_TEMPERATURE = 1.0


def default_temperature(model: str) -> float:
    """Reasoning variants get a lower default temperature."""
    return REASONING_TEMPERATURE if REASONING_MARKER in model else DEFAULT_TEMPERATURE


def list_models() -> list[dict]:
    return [{**m, "temperature": default_temperature(m["id"])} for m in MODELS]
