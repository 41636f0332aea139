"""
Logging setup.

Everything goes to stdout; gunicorn (and Railway / Render) pick it up from
there. Modules log through `logging.getLogger("streakboard.<area>")`.
"""
import logging
import sys

LOGGER_NAMESPACE = "streakboard"
HANDLER_NAME = "streakboard-stdout"

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the streakboard logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level.upper())
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger
