import logging
import sys
import os
from datetime import datetime

logger = logging.getLogger("server")

def console_level(name):
    """Numeric level for `name`, INFO when it is not a known level."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO

def setup_logging():
    logger.setLevel(logging.DEBUG)

    # LOG_TO_FILE=0 keeps output on stdout only
    if os.getenv("LOG_TO_FILE", "1") != "0":
        log_dir = os.getenv("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)
        log_filename = os.path.join(log_dir, f"server_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")

        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s:%(lineno)d - %(message)s'))
        logger.addHandler(file_handler)
        logger.info(f"Logging initialised. Writing to: {log_filename}")

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(console_level(os.getenv("LOG_LEVEL", "INFO")))
    stream_handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)-8s | %(message)s'))
    logger.addHandler(stream_handler)

if not logger.handlers:
    setup_logging()
