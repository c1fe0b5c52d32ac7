import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3

# Track if Sentry has been initialized (global singleton)
_sentry_initialized = False


def init_sentry(
    dsn: str,
    environment: str = "development",
    traces_sample_rate: float = 1.0,
) -> bool:
    """
    Initialize the Sentry SDK once for the host process.

    Sentry is an optional extra (``pip install unioauth[sentry]``). Without the
    SDK, or without a DSN, nothing happens.

    Args:
        dsn (str): Sentry DSN for error tracking.
        environment (str): Sentry environment name (development/production).
        traces_sample_rate (float): Performance monitoring sample rate (0.0 to 1.0).

    Returns:
        bool: True if this call initialized Sentry.
    """
    global _sentry_initialized

    if _sentry_initialized or not dsn:
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.asyncio import AsyncioIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration
    except ImportError:
        return False

    # Breadcrumbs for info and above, events for errors
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            AsyncioIntegration(),
        ],
    )
    _sentry_initialized = True
    return True


def _tag_sentry_component(sentry_tag: str) -> None:
    if not _sentry_initialized:
        return
    try:
        import sentry_sdk
    except ImportError:
        return
    sentry_sdk.set_tag("component", sentry_tag)


def _file_handler(log_file: str) -> logging.Handler:
    directory = os.path.dirname(log_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: int | str = logging.INFO,
    sentry_tag: Optional[str] = None,
    console: bool = False,
) -> logging.Logger:
    """
    Return the named logger, with its own handlers only when asked for.

    By default the logger gets a ``NullHandler`` and propagates, so records
    reach whatever the host configured and nothing else. With ``console`` or
    ``log_file`` the logger writes through its own console/rotating-file
    handlers and stops propagating, so a configured root logger does not
    print every record twice. Calling this twice for the same name does not
    attach duplicate handlers.

    Args:
        name (str): The name of the logger.
        log_file (str, optional): File path for a rotating file handler.
        level (int | str, optional): The logging level. Defaults to logging.INFO.
        sentry_tag (str, optional): Tag to identify this component in Sentry (e.g., "auth", "http").
        console (bool, optional): Also write records to stderr.

    Returns:
        logging.Logger: The configured logger instance.
    """
    if sentry_tag:
        _tag_sentry_component(sentry_tag)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(_file_handler(log_file))

    if not handlers:
        logger.addHandler(logging.NullHandler())
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False

    return logger
