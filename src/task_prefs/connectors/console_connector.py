# src/task_prefs/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_ui_model
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def render_ui_models(state: AppState) -> None:
    """Keep state.ui_model current and print every new model."""
    stream = state.view_model.tasks_ui_model()
    async with contextlib.aclosing(stream):
        async for model in stream:
            state.ui_model = model
            _print_ts(render_ui_model(model))


def _on_renderer_done(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        # The preference stream only ends on a non-recoverable error (e.g. corrupt sort_order).
        logger.error("Task list renderer stopped.", exc_info=exc)
        _print_ts("[CONSOLE] Task list stopped updating; see the log for details.")


async def run_console_loop(state: AppState) -> None:
    prefs = await state.view_model.initial_setup()
    logger.info(
        "Console connector started (show_completed=%s sort=%s).",
        prefs.show_completed,
        prefs.sort_order.value,
    )
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    renderer = asyncio.create_task(render_ui_models(state))
    renderer.add_done_callback(_on_renderer_done)

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                response = await command_registry.handle(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is None:
                response = "Not a command. Use /help to list available commands."
            _print_ts(response)
    finally:
        renderer.cancel()
        await asyncio.gather(renderer, return_exceptions=True)

    logger.info("Console connector finished.")
