"""
Logging setup for Polypath.
Level is controlled by LOG_LEVEL (default INFO); LOG_FILE adds a file handler.
"""

import os
import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_PACKAGE_LOGGERS = (
    'polypath',
    'polypath.api',
    'polypath.words',
    'polypath.llm',
    'polypath.schema',
    'polypath.controller',
)


def configure_logging() -> int:
    """Configure the root logger and return the effective level."""
    level_name = os.getenv('LOG_LEVEL', 'INFO').strip().upper()
    level = getattr(logging, level_name, logging.INFO)

    handlers = [logging.StreamHandler()]
    log_file = os.getenv('LOG_FILE')
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path))

    # Force reconfigure so uvicorn/Streamlit defaults don't suppress our records
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    logging.getLogger().setLevel(level)
    for name in _PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)
    return level
