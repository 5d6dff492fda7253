import logging
import sys

from devflow.config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _configure_root():
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("devflow")
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger under the application namespace.
    Modules call this with __name__, which already starts with 'devflow'.
    """
    _configure_root()
    if not name.startswith("devflow"):
        name = f"devflow.{name}"
    return logging.getLogger(name)
