import logging
import os
import sys
import time
from typing import List, Optional

from ai_locator.config import DEFAULT_LOG_LEVEL

# --- Process start time (for ElapsedTimeFormatter) ---
SCRIPT_START_TIME = time.time()

NOISY_LOGGERS = [
    "appium.webdriver.webdriver",
    "urllib3.connectionpool",
    "selenium.webdriver.remote.remote_connection",
]


class ElapsedTimeFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        elapsed_seconds = record.created - SCRIPT_START_TIME
        h = int(elapsed_seconds // 3600)
        m = int((elapsed_seconds % 3600) // 60)
        s = int(elapsed_seconds % 60)
        ms = int((elapsed_seconds - (h * 3600 + m * 60 + s)) * 1000)
        return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


class LoggerManager:
    """Installs console and file handlers on the root logger."""

    def __init__(self):
        self.handlers: List[logging.Handler] = []

    def setup_logging(self, log_level_str: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
        log_level_str = log_level_str or DEFAULT_LOG_LEVEL
        numeric_level = getattr(logging, log_level_str.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level string: {log_level_str}")

        logger = logging.getLogger()
        logger.setLevel(numeric_level)

        for handler in self.handlers:
            logger.removeHandler(handler)
            if isinstance(handler, logging.FileHandler):
                handler.close()
        self.handlers.clear()

        log_formatter = ElapsedTimeFormatter(
            "[%(levelname)s] (%(asctime)s) %(filename)s:%(lineno)d - %(message)s"
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(log_formatter)
        logger.addHandler(console_handler)
        self.handlers.append(console_handler)

        if log_file:
            log_file_dir = os.path.dirname(os.path.abspath(log_file))
            if log_file_dir:
                os.makedirs(log_file_dir, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setFormatter(log_formatter)
            logger.addHandler(file_handler)
            self.handlers.append(file_handler)

        if numeric_level > logging.DEBUG:
            for lib_name in NOISY_LOGGERS:
                logging.getLogger(lib_name).setLevel(logging.WARNING)

        return logger
