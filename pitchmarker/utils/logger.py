"""Logging utilities."""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional


def setup_logger(name: str = 'pitchmarker', log_level: int = logging.INFO,
                 log_file: str = None) -> logging.Logger:
    """Setup logger with console and optional file handler."""
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if not any(getattr(h, '_pitchmarker_console', False) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._pitchmarker_console = True
        logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def create_session_log_file(log_dir: str = 'logs') -> str:
    """Create timestamped log file for session."""
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{log_dir}/pitchmarker_{timestamp}.log"


def setup_from_config(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Configure the package logger from the 'logging' config section."""
    section = (config or {}).get('logging', {})
    level = logging.getLevelName(str(section.get('level', 'INFO')).upper())
    if not isinstance(level, int):
        level = logging.INFO
    log_file = None
    if section.get('log_to_file'):
        log_file = create_session_log_file(section.get('log_dir', 'logs'))
    return setup_logger('pitchmarker', level, log_file)
