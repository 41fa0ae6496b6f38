import csv
import io
import logging
import os
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler


LOG_DIR = os.environ.get("LOG_DIR", "logs")
LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "90"))

APP_HEADER = "datetime,database,action,contact_id,detail"

_app_logger = None


def _init_logger(name, filename, header):
    """Create a rotating file logger with CSV header."""
    os.makedirs(LOG_DIR, exist_ok=True)
    log_path = os.path.join(LOG_DIR, filename)

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    handler = TimedRotatingFileHandler(
        filename=log_path,
        when="midnight",
        interval=1,
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    # Write CSV header if file is new or empty
    if not os.path.exists(log_path) or os.path.getsize(log_path) == 0:
        logger.info(header)

    return logger


def get_app_logger():
    """Get or create the contact event logger."""
    global _app_logger
    if _app_logger is None:
        _app_logger = _init_logger("tripolis_contact.app", "app.log", APP_HEADER)
    return _app_logger


def _format_csv_line(fields):
    """Format a list of fields as a CSV line."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(fields)
    return buf.getvalue().rstrip("\r\n")


def log_event(database, action, contact_id="", detail="", datetime_str=""):
    """
    Log a contact operation to app.log.

    Actions: find, find_miss, create, create_existing, update,
             join, leave, subscriptions
    """
    logger = get_app_logger()
    line = _format_csv_line([
        datetime_str or datetime.now(timezone.utc).isoformat(),
        database,
        action,
        contact_id or "",
        detail,
    ])
    logger.info(line)
