import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler

from app.core.config import settings

log_format = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("mentorship")


def setup_logging() -> None:
    """Attach the console (and optional rotating file) handlers once."""
    logger.setLevel(settings.LOG_LEVEL.upper())
    if logger.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(log_format)
    logger.addHandler(console)

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        current_date = datetime.now().strftime("%Y-%m-%d")
        file_handler = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, f"mentorship_{current_date}.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(log_format)
        logger.addHandler(file_handler)


def log_user_action(user_id, action, extra_data=None):
    """Log a lifecycle action performed by a user."""
    if extra_data:
        logger.info(f"User {user_id} {action}. Data: {extra_data}")
    else:
        logger.info(f"User {user_id} {action}")


def log_guard_failure(user_id, action, reason):
    """Log an operation rejected by a state or capacity guard."""
    logger.warning(f"User {user_id} could not {action}: {reason}")
