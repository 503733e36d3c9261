# storefront/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

# Connection-pool chatter from concurrent image downloads
NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool")

_configured = False


def _level(name: str, default: str) -> int:
    return getattr(logging, os.getenv(name, default).upper(), logging.INFO)


def setup_logging():
    global _configured
    if _configured:
        return

    level = _level("LOG_LEVEL", "INFO")
    http_level = _level("HTTP_LOG_LEVEL", "WARNING")
    log_to_stdout = os.getenv("LOG_TO_STDOUT", "true").lower() == "true"
    log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_dir = os.getenv("LOG_DIR", "logs")
    log_file = os.getenv("LOG_FILE", os.path.join(log_dir, "shopeasy.log"))

    root = logging.getLogger()
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(threadName)s %(name)s] %(message)s"
    )

    # Leave pre-installed handlers (pytest caplog, embedding apps) alone
    if not root.handlers:
        if log_to_stdout:
            sh = logging.StreamHandler(sys.stdout)
            sh.setFormatter(formatter)
            root.addHandler(sh)

        if log_to_file:
            try:
                os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
                fh = RotatingFileHandler(
                    log_file,
                    maxBytes=int(os.getenv("LOG_MAX_BYTES", str(1024 * 1024))),
                    backupCount=int(os.getenv("LOG_BACKUPS", "2")),
                    encoding="utf-8",
                )
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Could not open log file %s: %s", log_file, e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
