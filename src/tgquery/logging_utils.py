"""Runtime logging helpers."""

from __future__ import annotations

import os
import sys
from logging import Handler
from typing import Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "console"]

_PROFILE_FORMATS: dict[LogProfile, str] = {
    "console": "[{extra[request]}] {message}",
    "default": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<6} | {name}:{function}:{line} | {extra[request]} | {message}",
}
_CONFIGURED: tuple[LogProfile, str] | None = None
NO_REQUEST = "-"


def _with_request(record: loguru.Record) -> None:
    # Set by the dispatcher through logger.contextualize for one in-flight request.
    record["extra"].setdefault("request", NO_REQUEST)


def _build_console_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=True,
        omit_repeated_times=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> None:
    """Configure process-level logging once per profile and level.

    Every record carries ``extra["request"]``: the engine type name of the
    request being dispatched, or ``-`` outside a dispatch.
    """

    global _CONFIGURED
    resolved_level = (level or os.getenv("TGQUERY_LOG_LEVEL", "INFO")).upper()
    if _CONFIGURED == (profile, resolved_level):
        return

    logger.remove()
    sink = _build_console_handler() if profile == "console" else sys.stderr
    logger.add(
        sink,
        level=resolved_level,
        format=_PROFILE_FORMATS[profile],
        backtrace=False,
        diagnose=False,
    )
    logger.configure(patcher=_with_request)
    _CONFIGURED = (profile, resolved_level)
