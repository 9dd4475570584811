import logging
import logging.handlers
import sys
from typing import Optional

FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """
    Configures the root logger. Console output goes to stderr so that stdout
    carries only the report. `log_file` adds a rotating file handler.
    """
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    handlers = [console]

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT
            )
        except OSError as e:
            print(f"Warning: could not open log file {log_file}: {e}", file=sys.stderr)
        else:
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
