import logging
import sys

from src.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Stdout handler с фиксированным форматом на root logger.

    Повторный вызов не дублирует handler.
    """
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)

    for existing in root.handlers:
        if getattr(existing, "_lens_pricing_handler", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._lens_pricing_handler = True
    root.addHandler(handler)
