"""Console logging setup for the batch sender."""
from __future__ import annotations

import logging
from typing import Union

from config import LoggingSettings

# Loggers owned by this project follow the configured level.
PROJECT_LOGGERS = (
    "batch_sender",
    "orchestrator",
    "validator",
    "messages",
    "reconcile",
    "sheets",
    "chain_client",
    "app",
)

# Chatty dependencies never log below WARNING.
THIRD_PARTY_LOGGERS = (
    "terra_classic_sdk",
    "aiohttp",
    "asyncio",
    "urllib3",
    "requests",
    "openpyxl",
)


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def configure(logging_settings: LoggingSettings) -> int:
    """Install one console handler and apply levels; returns the numeric project level."""
    level = _coerce_level(logging_settings.level)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(logging_settings.format, logging_settings.datefmt))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(max(logging.WARNING, level))

    for name in PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, level))

    logging.captureWarnings(True)
    return level
