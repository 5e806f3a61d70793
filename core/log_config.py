import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s %(name)-24s %(levelname)-8s %(message)s"


class ConsoleHandler(logging.StreamHandler):
    """Stream handler installed by ``setup_logging``."""


def setup_logging() -> None:
    """Install a single stream handler on the root logger.

    The level comes from LOG_LEVEL; without it, development runs at DEBUG and
    everything else at INFO. Calling this twice does not duplicate handlers.
    """
    level_name = settings.LOG_LEVEL or ("INFO" if settings.is_production else "DEBUG")
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h, ConsoleHandler) for h in root.handlers):
        handler = ConsoleHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    # SQL echo is noisy; keep it opt-in
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
