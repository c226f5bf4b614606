import logging
from typing import Optional

LOGGER_NAME = "studyhub"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Console (and optional file) output for the studyhub logger tree."""
    logger = logging.getLogger(LOGGER_NAME)
    level_value = logging.getLevelName(str(level).upper())
    logger.setLevel(level_value if isinstance(level_value, int) else logging.INFO)
    # Streamlit reruns the script; replace handlers instead of stacking them
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
