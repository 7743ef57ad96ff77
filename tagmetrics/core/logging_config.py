import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from .config_loader import get_base_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _build_file_handler(logging_cfg: Dict[str, Any]) -> Optional[logging.Handler]:
    log_file_rel = logging_cfg.get("file")
    if not log_file_rel:
        return None

    log_file = Path(log_file_rel)
    if not log_file.is_absolute():
        log_file = get_base_dir() / log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)

    return RotatingFileHandler(
        log_file,
        maxBytes=int(logging_cfg.get("max_bytes", 10 * 1024 * 1024)),
        backupCount=int(logging_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def setup_logging(config: Dict[str, Any], name: str = "tagmetrics") -> logging.Logger:
    """Configure the package logger from the ``logging`` config block.

    ``file`` may be empty to log to the console only; ``console: false``
    silences the stream handler. Handlers are attached once per logger.
    """
    logging_cfg = config.get("logging", {})

    log_level_str = str(logging_cfg.get("level", "INFO")).upper()
    level = getattr(logging, log_level_str, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        return logger

    fmt = logging.Formatter(LOG_FORMAT)

    file_handler = _build_file_handler(logging_cfg)
    if file_handler is not None:
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    if logging_cfg.get("console", True):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(fmt)
        logger.addHandler(stream_handler)

    return logger
