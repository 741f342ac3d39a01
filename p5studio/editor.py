"""
Editor shell state and controller.

EditorState is an immutable snapshot; the module-level functions are pure
transitions over it. EditorController owns the single live state and runs
the side effects: preview refresh, auto-save timer, generation and the
auto-generate loop.
"""

import asyncio
import logging
from dataclasses import dataclass, replace

from p5studio.catalog import DEFAULT_MODEL, default_temperature
from p5studio.client import GenerationClient, GenerationResult, RepeatingTask
from p5studio.downloads import DownloadDirectory
from p5studio.preview import SCREENSHOT_REQUEST, SCREENSHOT_RESULT, PreviewFrame

logger = logging.getLogger(__name__)

INITIAL_CODE = """function setup() {
  createCanvas(400, 400);
}

function draw() {
  background(220);
  ellipse(mouseX, mouseY, 50, 50);
}"""

AUTOSAVE_DELAY = 0.5
REGENERATE_DELAY = 0.5
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


@dataclass(frozen=True)
class EditorState:
    code: str = INITIAL_CODE
    prompt: str = ""
    model: str = DEFAULT_MODEL
    temperature: float = default_temperature(DEFAULT_MODEL)
    auto_save: bool = False
    auto_generate: bool = False
    generating: bool = False


def edit_code(state: EditorState, code: str) -> EditorState:
    return replace(state, code=code)


def set_prompt(state: EditorState, prompt: str) -> EditorState:
    return replace(state, prompt=prompt)


def select_model(state: EditorState, model: str) -> EditorState:
    """Switching model resets temperature to that model's default."""
    return replace(state, model=model, temperature=default_temperature(model))


def set_temperature(state: EditorState, value: float) -> EditorState:
    value = min(max(float(value), MIN_TEMPERATURE), MAX_TEMPERATURE)
    return replace(state, temperature=value)


def set_auto_save(state: EditorState, enabled: bool) -> EditorState:
    return replace(state, auto_save=enabled)


def set_auto_generate(state: EditorState, enabled: bool) -> EditorState:
    return replace(state, auto_generate=enabled)


def begin_generation(state: EditorState) -> EditorState:
    if state.generating:
        raise RuntimeError("A generation is already in flight")
    return replace(state, generating=True)


def end_generation(state: EditorState, result: GenerationResult | None = None) -> EditorState:
    """Leave the generating state; successful results replace the code verbatim."""
    if result is not None and result.ok:
        return replace(state, generating=False, code=result.code)
    return replace(state, generating=False)


class EditorController:
    """Wires the editor state to the preview frame, generation client and downloads."""

    def __init__(
        self,
        client: GenerationClient,
        frame: PreviewFrame | None = None,
        downloads: DownloadDirectory | None = None,
        state: EditorState | None = None,
        autosave_delay: float = AUTOSAVE_DELAY,
        regenerate_delay: float = REGENERATE_DELAY,
        max_auto_rounds: int | None = None,
    ):
        self.client = client
        self.frame = frame or PreviewFrame()
        self.downloads = downloads or DownloadDirectory("downloads")
        self.state = state or EditorState()
        self.autosave_delay = autosave_delay
        self.regenerate_delay = regenerate_delay
        self.max_auto_rounds = max_auto_rounds
        self._autosave_timer: asyncio.TimerHandle | None = None
        self._auto_task: RepeatingTask | None = None
        self.frame.refresh(self.state.code)

    def set_code(self, code: str) -> None:
        self.state = edit_code(self.state, code)
        self._code_changed()

    def set_prompt(self, prompt: str) -> None:
        self.state = set_prompt(self.state, prompt)

    def select_model(self, model: str) -> None:
        self.state = select_model(self.state, model)

    def set_temperature(self, value: float) -> None:
        self.state = set_temperature(self.state, value)

    def set_auto_save(self, enabled: bool) -> None:
        self.state = set_auto_save(self.state, enabled)
        if enabled:
            self._code_changed()
        else:
            self._cancel_autosave()

    def set_auto_generate(self, enabled: bool) -> None:
        self.state = set_auto_generate(self.state, enabled)
        if self._auto_task is None or not self._auto_task.running:
            return
        if enabled:
            self._auto_task.start()
        else:
            self._auto_task.cancel()

    def _code_changed(self) -> None:
        self.frame.refresh(self.state.code)
        if self.state.auto_save:
            self._schedule_autosave()

    def _schedule_autosave(self) -> None:
        self._cancel_autosave()
        loop = asyncio.get_running_loop()
        self._autosave_timer = loop.call_later(self.autosave_delay, self._autosave)

    def _cancel_autosave(self) -> None:
        if self._autosave_timer is not None:
            self._autosave_timer.cancel()
            self._autosave_timer = None

    def _autosave(self) -> None:
        self._autosave_timer = None
        self.request_screenshot()
        self.save_code()

    def request_screenshot(self) -> None:
        self.frame.post_message({"type": SCREENSHOT_REQUEST})

    def handle_message(self, message: dict) -> None:
        """Handle a message posted back by the preview frame."""
        if message.get("type") != SCREENSHOT_RESULT:
            return
        data = message.get("data")
        if not isinstance(data, str):
            logger.warning("Screenshot message without data, dropping it")
            return
        try:
            self.downloads.save_screenshot(data)
        except ValueError as e:
            logger.warning("Dropping screenshot: %s", e)

    def save_code(self):
        return self.downloads.save_code(self.state.code)

    def handle_key(self, key: str) -> asyncio.Task | None:
        if key == "Enter":
            return self.submit_prompt()
        return None

    def submit_prompt(self) -> asyncio.Task | None:
        """Start a generation in the background; ignored while one is running."""
        if self.state.generating:
            return None
        return asyncio.get_running_loop().create_task(self.generate())

    async def generate(self) -> GenerationResult | None:
        result = await self._generate_once()
        if result is not None and result.ok and self.state.auto_generate:
            self._start_auto_generate()
        return result

    async def _generate_once(self) -> GenerationResult | None:
        if self.state.generating:
            return None
        self.state = begin_generation(self.state)
        result = None
        try:
            state = self.state
            result = await self.client.generate(state.prompt, state.model, state.temperature)
            if result is not None and not result.ok:
                logger.error("Error generating code: %s", result.error)
        finally:
            self.state = end_generation(self.state, result)
        if result is not None and result.ok:
            self._code_changed()
        return result

    async def _auto_round(self) -> bool:
        if not self.state.auto_generate:
            return False
        result = await self._generate_once()
        if result is None:
            # a manual generation held the slot; try again next round
            return True
        return result.ok and self.state.auto_generate

    def _start_auto_generate(self) -> None:
        if self._auto_task is not None and self._auto_task.running:
            return
        self._auto_task = RepeatingTask(
            self._auto_round, self.regenerate_delay, max_rounds=self.max_auto_rounds
        )
        self._auto_task.start()

    @property
    def auto_task(self) -> RepeatingTask | None:
        return self._auto_task

    async def close(self) -> None:
        self._cancel_autosave()
        if self._auto_task is not None:
            self._auto_task.cancel()
            await self._auto_task.wait()
