# logging.py

import logging
import sys

import structlog


def setup_logging(level_name: str = "INFO") -> None:
    """Initialize structlog + stdlib logging on stderr.

    Stdout carries MCP protocol frames, so nothing may log there.  Records
    from third-party loggers (mcp, anyio) go through the same formatter.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    processor_formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        # Plain stdlib LogRecord -> event-dict before processors run
        foreign_pre_chain=[structlog.processors.add_log_level],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(processor_formatter)

    # force=True replaces any prior configuration
    logging.basicConfig(level=level, handlers=[handler], force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
