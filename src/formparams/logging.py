"""Structlog setup shared by the extraction and form validation pipelines."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

from formparams.settings import Settings, get_settings

if TYPE_CHECKING:
    from structlog.typing import EventDict

_configured = False

# Submitted values can hold secrets (passwords, tokens); only keys are logged.
_SUBMITTED_VALUE_KEYS = frozenset({"value", "raw_value", "values", "data"})


def _rename_event_key(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Expose the structlog ``event`` under ``message``.

    Args:
        logger: The logger instance (unused).
        method_name: The logging method name (unused).
        event_dict: The original event dictionary.

    Returns:
        The event dictionary with a "message" key instead of "event".
    """
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _drop_submitted_values(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Strip user-submitted values from the event and its ``extra`` payload."""
    for key in _SUBMITTED_VALUE_KEYS:
        event_dict.pop(key, None)
    extra = event_dict.get("extra")
    if isinstance(extra, dict):
        event_dict["extra"] = {key: value for key, value in extra.items() if key not in _SUBMITTED_VALUE_KEYS}
    return event_dict


def configure_logging(*, settings: Settings | None = None, force: bool = False) -> None:
    """Configure structlog over stdlib logging.

    Args:
        settings (Settings | None): Settings providing level, renderer and log file.
        force (bool): Reconfigure even if logging was already set up.
    """
    global _configured  # noqa: PLW0603

    if _configured and not force:
        return

    config = settings or get_settings()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))
    logging.basicConfig(level=log_level, format="%(message)s", handlers=handlers, force=force)

    renderer: Any = structlog.processors.JSONRenderer() if config.log_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            _drop_submitted_values,
            _rename_event_key,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "formparams") -> structlog.BoundLogger:
    """Return a structlog logger, configuring logging on first use.

    Args:
        name (str): Logger name, usually the module ``__name__``.

    Returns:
        structlog.BoundLogger: Bound logger.
    """
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)
