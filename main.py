#!/usr/bin/env python3
"""
Browser automation runner.

Main entry point: dispatches scheduled browser automation runs.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional

from browser_runner.core.config.settings import RunnerSettings, get_settings
from browser_runner.core.exceptions import ConfigurationError
from browser_runner.core.logger import setup_structured_logging
from browser_runner.models.database import Database
from browser_runner.repositories import (
    BrowserConfigRepository,
    ProxyRepository,
    RunErrorRepository,
    RunRepository,
    RunResultRepository,
)
from browser_runner.services.actions import build_action_registry
from browser_runner.services.automation_runner import AutomationRunner
from browser_runner.services.browser.session import BrowserSessionFactory
from browser_runner.services.execution_guard import ExecutionGuard
from browser_runner.services.run_dispatcher import RunDispatcher
from browser_runner.services.session_health import SessionHealthTracker


def build_dispatcher(db: Database, settings: RunnerSettings) -> RunDispatcher:
    """
    Wire repositories, browser sessions, actions and the runner.

    Args:
        db: Connected database
        settings: Runner settings

    Returns:
        Dispatcher ready to run
    """
    runs = RunRepository(db)
    configs = BrowserConfigRepository(db)
    runner = AutomationRunner(
        runs=runs,
        results=RunResultRepository(db),
        errors=RunErrorRepository(db),
        configs=configs,
        proxies=ProxyRepository(db),
        actions=build_action_registry(BrowserSessionFactory(settings), settings),
        health=SessionHealthTracker(configs),
        guard=ExecutionGuard(enabled=settings.single_writer_check),
        settings=settings,
    )
    return RunDispatcher(runner, runs, configs, settings)


async def run(once: bool, limit: Optional[int], settings: RunnerSettings) -> None:
    """
    Connect the database and dispatch runs.

    Args:
        once: Dispatch a single batch and return
        limit: Maximum runs per batch
        settings: Runner settings
    """
    logger = logging.getLogger(__name__)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    async with Database(settings.database_url, pool_size=settings.db_pool_size) as db:
        dispatcher = build_dispatcher(db, settings)
        if once:
            executed = await dispatcher.run_pending(limit)
            logger.info(f"Dispatched {executed} runs")
        else:
            await dispatcher.run_forever(stop_event, limit)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Browser automation run engine")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Dispatch one batch of scheduled runs and exit",
    )
    parser.add_argument("--limit", type=int, default=None, help="Maximum runs per batch")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (defaults to LOG_LEVEL)",
    )

    args = parser.parse_args()
    settings = get_settings()

    setup_structured_logging(
        args.log_level or settings.log_level,
        json_format=settings.log_json,
        logs_dir=settings.logs_dir,
        diagnose=settings.is_development(),
    )
    logger = logging.getLogger(__name__)

    try:
        if args.limit is not None and args.limit < 1:
            raise ConfigurationError("--limit must be at least 1")
        asyncio.run(run(args.once, args.limit, settings))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
