# src/projboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _say(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _prompt(state: AppState) -> str:
    view = state.view
    where = str(view.current_view)
    if view.selected_project_id:
        where += f":{view.selected_project_id}"
    return f"projboard [{where}] > "


def _read_line(state: AppState) -> str | None:
    """Next non-empty input line; None when the user closed the console (EOF / Ctrl+C)."""
    while True:
        try:
            line = input(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received.")
            return None
        except KeyboardInterrupt:
            print()
            logger.info("Console KeyboardInterrupt received.")
            return None
        if line:
            return line


def _run_command(state: AppState, runner: asyncio.Runner, line: str) -> str:
    try:
        reply = runner.run(command_registry.handle(state, line))
    except KeyboardInterrupt:
        # Writes already sent keep running on the session loop.
        logger.info("Command interrupted: %s", line)
        return "Interrupted."
    except Exception:
        logger.exception("Command handler crashed: %s", line)
        return "Internal error while handling the command (details in the log file)."
    if reply is None:
        return "Commands start with '/'. Use /help to list them."
    return reply


def run_console_loop(state: AppState, runner: asyncio.Runner) -> None:
    """
    Blocking REPL on the main thread. Each command runs to completion on the
    session loop owned by `runner`; in-flight fetches stay on that loop between
    commands.
    """
    logger.info("Console started (offline=%s).", state.offline)
    _say("Type /help for commands, /exit to quit.")
    if state.offline:
        _say("No remote store configured: running on the in-memory demo store, nothing is saved.")

    _say(_run_command(state, runner, "/dashboard"))

    while (line := _read_line(state)) is not None:
        if line.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break
        _say(_run_command(state, runner, line))

    logger.info("Console finished.")
