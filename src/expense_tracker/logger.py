import logging
import os
from datetime import datetime

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s:%(lineno)d - %(message)s"

_configured = False


def _configure_root():
    """Attach console and file handlers to the root logger once per process."""
    global _configured
    if _configured:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    try:
        os.makedirs(LOG_DIR, exist_ok=True)
        log_file = os.path.join(LOG_DIR, f"{datetime.now().strftime('%Y_%m_%d')}.log")
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    except OSError as e:
        root.warning("File logging disabled: %s", e)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a named logger, configuring handlers on first use."""
    _configure_root()
    return logging.getLogger(name)
