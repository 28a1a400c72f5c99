"""Logger helpers; every module logs under the ``sports_proxy`` hierarchy."""

import logging
import sys

ROOT_LOGGER = "sports_proxy"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``sports_proxy`` itself, or a child of it for ``name``.

    Module names already under the package (``__name__``) are used as they are.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(level: int = logging.INFO, format_str: str = DEFAULT_FORMAT) -> None:
    """Attach a stdout handler to the package logger.

    Intended for the hosting process or ad-hoc scripts; library code never
    calls it. Calling it twice does not duplicate output.

    Args:
        level: Level for the package logger.
        format_str: ``logging.Formatter`` format string.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if any(not isinstance(h, logging.NullHandler) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    root.addHandler(handler)
    root.setLevel(level)


# Silent by default until the application configures logging.
logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())
