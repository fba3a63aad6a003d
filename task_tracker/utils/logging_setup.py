import logging
import sys

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at INFO/DEBUG.
QUIET_LOGGERS = ("pymongo", "httpx", "httpcore", "openai")


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep our own logs; let other libraries through only from WARNING."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(QUIET_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(level: str | int = "INFO") -> None:
    """
    Install a single stderr handler on the root logger.

    Safe to call more than once (e.g. one app per test); the handler is only
    added the first time, later calls just adjust the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_task_tracker", False):
            handler.setLevel(level)
            return

    handler = logging.StreamHandler(sys.stderr)
    handler._task_tracker = True
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
