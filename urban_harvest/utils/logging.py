# urban_harvest/utils/logging.py
import logging
import sys

from urban_harvest.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _configure_root():
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("urban_harvest")
    root.setLevel(LOG_LEVEL.upper())
    root.addHandler(handler)
    root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger under the urban_harvest hierarchy, configured on first use."""
    _configure_root()
    if not name.startswith("urban_harvest"):
        name = f"urban_harvest.{name}"
    return logging.getLogger(name)
