from __future__ import annotations

import logging

_NOISY_LOGGERS: tuple[str, ...] = (
    "httpx",
    "httpcore",
    "httpcore.connection",
    "httpcore.http11",
)

_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def _ensure_stream_handler(logger: logging.Logger) -> None:
    handler_exists = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    if handler_exists:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)


def configure_logging(level_name: str | None = None) -> None:
    """Configure the root logger and keep per-request HTTP chatter out of the poll log."""

    lvl = getattr(logging, (level_name or 'INFO').upper(), None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)
    _ensure_stream_handler(root_logger)

    for noisy_name in _NOISY_LOGGERS:
        logger = logging.getLogger(noisy_name)
        if logger.level < logging.WARNING:
            logger.setLevel(logging.WARNING)
