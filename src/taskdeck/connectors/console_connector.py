# src/taskdeck/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_states import TaskOperationSuccess, TaskState

logger = logging.getLogger(__name__)

LineReader = Callable[[str], Awaitable[str]]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _on_task_state(state: TaskState) -> None:
    # Views and errors are rendered by the command reply; only acks are printed here.
    if isinstance(state, TaskOperationSuccess):
        _print_ts(state.message)


async def read_stdin_line(prompt: str) -> str:
    """
    Read one line from stdin without tying up the loop's executor.

    input() runs on a daemon thread, so a cancelled read (Ctrl-C under
    asyncio.run) leaves the thread behind instead of blocking loop shutdown.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def deliver(line: str | None, exc: BaseException | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def worker() -> None:
        try:
            line = input(prompt)
        except Exception as e:
            result: tuple[str | None, BaseException | None] = (None, e)
        else:
            result = (line, None)
        # The loop may already be closed after an interrupt.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(deliver, *result)

    threading.Thread(target=worker, name="taskdeck-stdin", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState, *, read_line: LineReader = read_stdin_line) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "taskdeck"))
    _print_ts(f"[{app_name}] Type /help for commands, /load to fetch tasks, /exit to quit.\n")

    unsubscribe = state.tasks.subscribe(_on_task_state)
    try:
        while True:
            try:
                user_input = (await read_line(">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except asyncio.CancelledError:
                logger.info("Console interrupted, exiting.")
                print()
                raise

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = await command_registry.handle(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is None:
                reply = "Commands start with '/'. Use /help to list them."
            _print_ts(reply)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
