from p5studio.engines.base import EngineResponse, GenerationEngine, Turn
from p5studio.engines.registry import get_engine, list_engines, register

__all__ = [
    "EngineResponse",
    "GenerationEngine",
    "Turn",
    "get_engine",
    "list_engines",
    "register",
]
