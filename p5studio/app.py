"""
FastAPI application: p5.js editor page, live-preview documents and the
generation proxy in front of pluggable model engines.
"""

import importlib
import json
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field
from sse_starlette.sse import EventSourceResponse

from p5studio import catalog
from p5studio.config import load_settings
from p5studio.engines import registry
from p5studio.engines.base import Turn
from p5studio.preview import SANDBOX, render_preview_html
from p5studio.utils import FenceParseError, extract_code, normalize_code

logger = logging.getLogger(__name__)

# Register engine adapters (import side effect); a missing SDK only disables that engine
for _module in ("p5studio.engines.gemini_engine", "p5studio.engines.langchain_engine"):
    try:
        importlib.import_module(_module)
    except ImportError as e:
        logger.warning("Failed to import %s: %s", _module, e)

# Project root (parent of p5studio/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent
FRONTEND_DIR = PROJECT_ROOT / "frontend"

settings = load_settings()

app = FastAPI(title="p5studio - p5.js editor with AI generation")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


class HistoryTurn(BaseModel):
    role: str = Field(pattern="^(user|model)$")
    text: str


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    prompt: str
    model_name: str = Field(default=catalog.DEFAULT_MODEL, alias="modelName")
    temperature: float = Field(default=catalog.DEFAULT_TEMPERATURE, ge=0, le=2)
    history: list[HistoryTurn] = Field(default_factory=list)
    engine: str | None = None


class PreviewRequest(BaseModel):
    code: str


async def _generate(request: GenerateRequest) -> str:
    """Run the engine and extract the code. Raises on any failure."""
    engine = registry.get_engine(request.engine or settings.engine)
    history = [Turn(role=t.role, text=t.text) for t in request.history]
    response = await engine.generate(
        request.prompt,
        request.model_name,
        request.temperature,
        history=history,
    )
    return extract_code(response.text)


def _error_response(e: Exception) -> JSONResponse:
    if isinstance(e, FenceParseError):
        logger.error("Could not parse generated code: %s", e)
        return JSONResponse(status_code=502, content={"error": str(e)})
    if isinstance(e, registry.UnknownEngineError):
        logger.error("%s", e)
        return JSONResponse(status_code=400, content={"error": str(e)})
    logger.exception("Error generating code")
    return JSONResponse(status_code=500, content={"error": str(e)})


@app.get("/", response_class=HTMLResponse)
async def index():
    return HTMLResponse(content=(FRONTEND_DIR / "index.html").read_text(encoding="utf-8"))


@app.get("/api/models")
async def list_models():
    """Models for the selector, each with its default temperature."""
    return JSONResponse(content={"default": settings.default_model, "models": catalog.list_models()})


@app.get("/api/engines")
async def list_engines():
    """List available generation engines (id, name, supports_models)."""
    return JSONResponse(content=registry.list_engines())


@app.post("/api/preview")
async def preview(request: PreviewRequest):
    """Preview document for a sketch plus its normalized change-detection key."""
    return JSONResponse(content={
        "html": render_preview_html(request.code, settings.p5_url),
        "normalized": normalize_code(request.code),
        "sandbox": SANDBOX,
    })


@app.post("/api/generate")
async def generate(request: GenerateRequest):
    try:
        code = await _generate(request)
    except Exception as e:
        return _error_response(e)
    logger.info("Generated %d characters with %s", len(code), request.model_name)
    return JSONResponse(content={"code": code})


@app.post("/api/generate/stream")
async def generate_stream(request: GenerateRequest):
    """Same as /api/generate, reported as server-sent events."""

    async def event_generator():
        yield {"event": "status", "data": json.dumps({"status": "Generating..."})}
        try:
            code = await _generate(request)
            yield {"event": "code", "data": json.dumps({"code": code})}
        except Exception as e:
            error = _error_response(e)
            yield {
                "event": "error",
                "data": json.dumps({"error": str(e), "status": error.status_code}),
            }
        yield {"event": "done", "data": json.dumps({"status": "complete"})}

    return EventSourceResponse(event_generator())
