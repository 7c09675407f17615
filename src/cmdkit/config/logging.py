"""Framework diagnostics: structlog over stdlib ``logging``.

Every ``cmdkit.*`` logger ends up on one handler (stderr unless a stream is
given), rendered either for humans or as JSON lines (``--log-json``).

Levels per logger, see :func:`logger_levels`:

- quiet (default): ``cmdkit`` at WARNING, which covers the shadowed-command
  and plugin-load warnings.
- ``--verbose``: DEBUG, including the ``span.complete`` telemetry events.
  The mirror of command output kept by ``cmdkit.commands.log`` only drops to
  DEBUG in JSON mode; on a terminal it is already on stdout.

Command output itself never goes through here; it is rendered by CommandLog.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

CMDKIT_LOGGER = "cmdkit"
TELEMETRY_LOGGER = "cmdkit.telemetry"
COMMAND_LOG_LOGGER = "cmdkit.commands.log"


def logger_levels(*, verbose: bool, log_json: bool) -> dict[str, int]:
    """Level for each cmdkit logger.  NOTSET defers to ``cmdkit``."""
    if not verbose:
        return {
            CMDKIT_LOGGER: logging.WARNING,
            TELEMETRY_LOGGER: logging.NOTSET,
            COMMAND_LOG_LOGGER: logging.NOTSET,
        }
    return {
        CMDKIT_LOGGER: logging.DEBUG,
        TELEMETRY_LOGGER: logging.DEBUG,
        COMMAND_LOG_LOGGER: logging.DEBUG if log_json else logging.INFO,
    }


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderers(*, log_json: bool, colors: bool) -> list[structlog.types.Processor]:
    if log_json:
        # Lifecycle failures are logged with exc_info; keep them on one line.
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=colors)]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    no_color: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog and route cmdkit's loggers to a single handler.

    Safe to call more than once; the previous root handlers are replaced.

    Args:
        verbose: DEBUG diagnostics and telemetry spans.
        log_json: JSON lines instead of the console renderer.
        no_color: Never emit ANSI colors, even on a terminal.
        stream: Where to write; stderr when omitted.
    """
    out = stream if stream is not None else sys.stderr
    colors = not no_color and out.isatty()
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderers(log_json=log_json, colors=colors),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    for name, level in logger_levels(verbose=verbose, log_json=log_json).items():
        logging.getLogger(name).setLevel(level)
