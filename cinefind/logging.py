"""Structured logging helpers."""

from __future__ import annotations

import logging

import structlog


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return logging.getLevelName(level.upper()) if level.strip() else logging.INFO
    return level


def configure_logging(level: int | str = logging.INFO) -> None:
    resolved = _resolve_level(level)
    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()

__all__ = ["configure_logging", "logger"]
