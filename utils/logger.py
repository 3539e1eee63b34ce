import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


class LoggerManager:
    """
    Manages the application's logging configuration.
    It sets up structured logging to the console and to a rotating
    daily log file.

    A relative log_dir is resolved against the current working directory.
    If the directory or the file cannot be created, a warning is logged and
    only the console handler is kept.
    """

    def __init__(self,
                 log_dir: Optional[str] = "logs",
                 level: int = logging.INFO,
                 file_enabled: bool = True):
        if log_dir is not None:
            log_dir = os.path.abspath(log_dir)
        self.log_dir = log_dir
        self.level = level
        self.file_enabled = file_enabled and log_dir is not None
        self.log_file: Optional[str] = None
        self.setup_logging()

    def setup_logging(self):
        log_formatter = logging.Formatter(LOG_FORMAT)

        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)

        if root_logger.hasHandlers():
            root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(log_formatter)
        root_logger.addHandler(console_handler)

        if self.file_enabled:
            log_file = os.path.join(
                self.log_dir,
                f"log_{datetime.now().strftime('%Y-%m-%d')}.txt")
            try:
                os.makedirs(self.log_dir, exist_ok=True)
                file_handler = RotatingFileHandler(log_file,
                                                   maxBytes=5 * 1024 * 1024,
                                                   backupCount=5,
                                                   encoding='utf-8')
            except OSError as e:
                logging.warning(
                    f"Cannot write log files to {self.log_dir}: {e}. "
                    "Logging to the console only.")
            else:
                file_handler.setFormatter(log_formatter)
                root_logger.addHandler(file_handler)
                self.log_file = log_file

        logging.debug("LoggerManager initialized and logging is configured.")


def get_logger(name="mousemover"):
    """
    Returns a logger instance for a specific part of the application.
    """
    return logging.getLogger(name)


def handle_global_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger = get_logger("GlobalExceptionHandler")

    logger.critical(
        "An unhandled exception occurred! Application may be unstable.",
        exc_info=(exc_type, exc_value, exc_traceback))


def setup_exception_hook():
    sys.excepthook = handle_global_exception
    logging.debug("Global exception hook has been set.")
