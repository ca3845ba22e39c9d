import logging
import sys

import structlog

_FALLBACK_HANDLER = "taskbatch_fallback_handler"


def _configure_structlog():
    """Configures structlog to produce JSON-formatted logs via stdlib."""
    if structlog.is_configured():
        return

    # This is a fallback configuration. Applications should configure logging themselves.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.set_name(_FALLBACK_HANDLER)

    root_logger = logging.getLogger()
    if _FALLBACK_HANDLER not in [h.get_name() for h in root_logger.handlers]:
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Not cached, so loggers follow later reconfiguration (e.g. structlog.testing).
        cache_logger_on_first_use=False,
    )


_structlog_configured = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Returns a structlog logger for the given name.

    The first call installs a JSON logging setup on top of the standard
    library's root logger, unless the application already configured
    structlog itself.
    """
    global _structlog_configured
    if not _structlog_configured:
        _configure_structlog()
        _structlog_configured = True
    return structlog.get_logger(name)
