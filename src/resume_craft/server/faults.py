"""Process-level fault handling: log, then terminate.

The server is expected to run under a supervisor that restarts it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import threading

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 1


def _terminate() -> None:
    logging.shutdown()
    os._exit(FATAL_EXIT_CODE)


def _excepthook(exc_type, exc, tb) -> None:
    logger.critical("Uncaught exception: %s", exc, exc_info=(exc_type, exc, tb))
    _terminate()


def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    logger.critical(
        "Uncaught exception in thread %s: %s",
        args.thread.name if args.thread else "?",
        args.exc_value,
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
    _terminate()


def loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Event-loop handler: unhandled task exceptions are fatal."""
    exc = context.get("exception")
    if exc is None:
        logger.warning("Event loop: %s", context.get("message"))
        return
    logger.critical("Unhandled exception in event loop: %s", context.get("message"), exc_info=exc)
    _terminate()


def install_fault_handlers() -> None:
    """Make uncaught exceptions in the main thread and worker threads fatal."""
    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook
