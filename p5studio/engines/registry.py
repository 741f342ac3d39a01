"""
Engine discovery and selection. Engine modules register themselves on import.
"""

from p5studio.engines.base import GenerationEngine


class UnknownEngineError(ValueError):
    pass


_engines: dict[str, type[GenerationEngine]] = {}
_instances: dict[str, GenerationEngine] = {}


def register(engine_id: str, engine_class: type[GenerationEngine]) -> None:
    _engines[engine_id] = engine_class
    _instances.pop(engine_id, None)


def get_engine(engine_id: str, **kwargs) -> GenerationEngine:
    """Get or create an engine instance by id."""
    if engine_id not in _engines:
        raise UnknownEngineError(f"Unknown engine: {engine_id}. Available: {list(_engines.keys())}")
    if engine_id not in _instances:
        _instances[engine_id] = _engines[engine_id](**kwargs)
    return _instances[engine_id]


def list_engines() -> list[dict]:
    """Return list of {id, name, supports_models} for each registered engine."""
    return [
        {
            "id": eid,
            "name": cls.name or eid,
            "supports_models": list(cls.supports_models),
        }
        for eid, cls in _engines.items()
    ]
