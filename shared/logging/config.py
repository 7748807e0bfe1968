"""Wire the JSON formatter into the bot and its help web server."""

from __future__ import annotations

import logging
from typing import Mapping

from .structured import JsonFormatter

__all__ = ["setup_logging"]


def _use_formatter(logger: logging.Logger, formatter: logging.Formatter) -> None:
    streams = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
    if not streams:
        streams = [logging.StreamHandler()]
        logger.addHandler(streams[0])
    for handler in streams:
        handler.setFormatter(formatter)


def setup_logging(
    *,
    static_fields: Mapping[str, str] | None = None,
    level: str | int = logging.INFO,
    access_logger_name: str = "aiohttp.access",
) -> logging.Logger:
    """Configure JSON logging for the ``c1c.*`` loggers and HTTP access.

    Parameters
    ----------
    static_fields:
        Fields stamped on every event, normally ``{"bot": BOT_NAME}``.
    level:
        Root level from ``LOG_LEVEL``, as a name (``"DEBUG"``) or a number.
    access_logger_name:
        Logger the tracing middleware writes one ``http_request`` event to per
        help page or status request. It does not propagate to the root logger.

    Returns
    -------
    logging.Logger
        The access logger.
    """

    static = dict(static_fields or {})

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _use_formatter(root_logger, JsonFormatter(static=static))

    access_logger = logging.getLogger(access_logger_name)
    access_logger.propagate = False
    access_logger.handlers.clear()
    access_logger.setLevel(logging.INFO)
    _use_formatter(
        access_logger,
        JsonFormatter(static={**static, "logger": access_logger_name}),
    )

    return access_logger
