import logging
import sys

from rich.logging import RichHandler

from magus.core.config import get_settings


def setup_logging():
    """
    Configures logging for the entire application.

    Rich gives coloured logs and tracebacks for development; with
    LOG_RICH disabled the plain one-line format is kept so log shippers
    in production can parse it.
    """
    settings = get_settings()
    log_level = settings.LOG_LEVEL.upper()

    if settings.LOG_RICH:
        logging.basicConfig(
            level=log_level,
            force=True,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )
    else:
        logging.basicConfig(
            level=log_level,
            force=True,
            stream=sys.stdout,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    # Make uvicorn use the root logger config
    logging.getLogger("uvicorn.access").handlers = logging.getLogger().handlers
    logging.getLogger("uvicorn.error").handlers = logging.getLogger().handlers

    # botocore is chatty at DEBUG
    if log_level == "DEBUG":
        logging.getLogger("botocore").setLevel(logging.INFO)
