import logging
from typing import Optional

_FORMAT = "[%(levelname)s] %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "subplay") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers or "." in name:
        # child loggers propagate to the configured "subplay" logger
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    fmt = logging.Formatter(_FORMAT)
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    return logger


def configure_logging(
    *,
    logger_name: str = "subplay",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_path: Optional[str] = None,
) -> logging.Logger:
    """
    Process-level logging baseline.

    - console handler -> stderr at console_level
    - optional file handler -> log_path at file_level
    Calling it again replaces the handlers instead of stacking them.
    """
    logger = logging.getLogger(logger_name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(console)

    level = console_level
    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)
        level = min(level, file_level)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def parse_level(name: str, default: int = logging.INFO) -> int:
    value = logging.getLevelName((name or "").strip().upper())
    return value if isinstance(value, int) else default
