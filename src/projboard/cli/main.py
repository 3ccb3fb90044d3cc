# src/projboard/cli/main.py

"""
`projboard` entry point: logging, then AppState, then the console REPL.

One asyncio.Runner lives for the whole session so cached collections and
background writes survive between commands.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


async def _close(state: AppState) -> None:
    try:
        await state.data.aclose()
    except Exception:
        logger.debug("Closing the store failed.", exc_info=True)


def main() -> None:
    settings = get_settings()
    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=level_from_name(settings.log_level),
    )
    logger.info("Starting %s (log file: %s)", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    with asyncio.Runner() as runner:
        try:
            run_console_loop(state, runner)
        finally:
            runner.run(_close(state))
            logger.info("Bye.")


if __name__ == "__main__":
    main()
