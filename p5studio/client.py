"""
Client side of sketch generation: a single-flight HTTP client for
/api/generate and a cancellable repeating task for auto-generate.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"


class GenerationState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"


@dataclass
class GenerationResult:
    """Either generated code or an error message, never both."""
    code: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GenerationClient:
    """
    Posts prompts to the generation proxy.

    Only one request may be in flight: a call made while GENERATING returns
    None without touching the network.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: httpx.AsyncClient | None = None,
        timeout: float = 300.0,
        engine: str | None = None,
    ):
        self.engine = engine
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._state = GenerationState.IDLE

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def generating(self) -> bool:
        return self._state is GenerationState.GENERATING

    def _enter(self) -> None:
        self._state = GenerationState.GENERATING

    def _exit(self) -> None:
        self._state = GenerationState.IDLE

    async def generate(
        self,
        prompt: str,
        model: str,
        temperature: float,
        history: list[dict] | None = None,
    ) -> GenerationResult | None:
        if self.generating:
            logger.debug("Generation already in flight, dropping request")
            return None
        self._enter()
        try:
            body = {"prompt": prompt, "modelName": model, "temperature": temperature}
            if history:
                body["history"] = history
            if self.engine:
                body["engine"] = self.engine
            response = await self._http.post(GENERATE_PATH, json=body)
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            if response.is_error:
                error = payload.get("error") or f"HTTP {response.status_code}"
                logger.error("Error generating code: %s", error)
                return GenerationResult(error=error)
            logger.info("Generated %d characters with %s", len(payload.get("code", "")), model)
            return GenerationResult(code=payload.get("code", ""))
        except httpx.HTTPError as e:
            logger.error("Error generating code: %s", e)
            return GenerationResult(error=str(e))
        finally:
            self._exit()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()


class RepeatingTask:
    """
    Waits `delay` seconds, runs `action`, and repeats while it returns True.

    cancel() stops the loop before the next round and wakes a pending wait;
    an action already running is allowed to finish.
    """

    def __init__(
        self,
        action: Callable[[], Awaitable[bool]],
        delay: float,
        max_rounds: int | None = None,
    ):
        self._action = action
        self._delay = delay
        self._max_rounds = max_rounds
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None
        self.rounds = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def start(self) -> asyncio.Task:
        if self.running:
            # re-arm a loop cancelled while its round is still in flight
            self._stop.clear()
            return self._task
        self._stop.clear()
        self._task = asyncio.create_task(self._run())
        return self._task

    def cancel(self) -> None:
        self._stop.set()

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while not self._stop.is_set():
            if self._max_rounds is not None and self.rounds >= self._max_rounds:
                break
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._delay)
            except asyncio.TimeoutError:
                pass
            if self._stop.is_set():
                break
            self.rounds += 1
            if not await self._action():
                break
        logger.debug("Repeating task stopped after %d rounds", self.rounds)
