"""structlog setup shared by the app and the CLI.

Learn: Log lines go to stderr, never stdout, so commands like
`usergate users --json` can be piped straight into a JSON parser.
The request id bound by RequestIdMiddleware is merged into every
entry through structlog's contextvars processor.
"""

import logging
import sys

import structlog


def _stderr_logger(*args):
    # sys.stderr is looked up per logger, so a swapped stream (pytest
    # capture, click's CliRunner) is picked up after configuration.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog. Safe to call more than once."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
