"""
batterybridge/utils/logger.py

BatteryBridge - Logging Utility (Console, optional Rotating File, Verbosity)
---------------------------------------------------------------------------
• One registry of named loggers sharing a single format
• Console output by default; python-for-android forwards stdout to logcat
• Optional rotating log file, runtime verbosity switch, traceback helper

License: Apache 2.0
"""

import sys
import logging
from logging.handlers import RotatingFileHandler
from threading import Lock
from pathlib import Path

DEFAULT_LOG_FILE = "logs/batterybridge.log"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_MAX_BYTES = 1 * 1024 * 1024  # 1 MB before rotating
DEFAULT_BACKUP_COUNT = 3

LOG_FORMAT = '[%(asctime)s | %(levelname)-8s | %(module)s:%(lineno)d] %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'
_LOGGERS = {}
_HANDLERS = []  # shared by every registered logger
_LOG_INIT_LOCK = Lock()


class LoggerConfig:
    """Logger settings, read from the ``logging`` section of a config dict."""
    def __init__(self, config_dict: dict = None):
        cfg = config_dict.get('logging', {}) if config_dict else {}
        self.log_to_file = cfg.get('log_to_file', False)
        self.log_to_console = cfg.get('log_to_console', True)
        self.log_file = cfg.get('log_file', DEFAULT_LOG_FILE)
        self.log_level = getattr(logging, str(cfg.get('level', 'INFO')).upper(), DEFAULT_LOG_LEVEL)
        self.max_bytes = cfg.get('max_bytes', DEFAULT_MAX_BYTES)
        self.backup_count = cfg.get('backup_count', DEFAULT_BACKUP_COUNT)


def _build_handlers(cfg: LoggerConfig) -> list:
    fmt = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers = []

    if cfg.log_to_file:
        log_file = Path(cfg.log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(RotatingFileHandler(
                log_file, maxBytes=cfg.max_bytes, backupCount=cfg.backup_count, encoding='utf-8'))
        except OSError as e:
            print(f"Logger: file handler setup failed: {e}", file=sys.stderr)

    # Never leave the loggers without an output
    if cfg.log_to_console or not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(fmt)
        handler.setLevel(cfg.log_level)
    return handlers


def _attach(logger: logging.Logger, level: int):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in _HANDLERS:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str = "batterybridge", config_dict: dict = None) -> logging.Logger:
    """
    Get a registered logger.

    All registered loggers write through the same handlers, so a later
    ``setup_logging`` call reconfigures loggers created at import time too.
    Passing ``config_dict`` reconfigures the whole registry.
    """
    if config_dict is not None:
        setup_logging(config_dict)
    if name in _LOGGERS:
        return _LOGGERS[name]

    with _LOG_INIT_LOCK:
        if name in _LOGGERS:
            return _LOGGERS[name]
        if not _HANDLERS:
            _HANDLERS.extend(_build_handlers(LoggerConfig()))

        logger = logging.getLogger(name)
        level = _HANDLERS[0].level if _HANDLERS else DEFAULT_LOG_LEVEL
        _attach(logger, level)
        _LOGGERS[name] = logger
        return logger


def setup_logging(config_dict: dict = None) -> logging.Logger:
    """Rebuild the shared handlers from config and apply them to every registered logger."""
    cfg = LoggerConfig(config_dict)
    with _LOG_INIT_LOCK:
        for handler in _HANDLERS:
            handler.close()
        _HANDLERS[:] = _build_handlers(cfg)
        for logger in _LOGGERS.values():
            _attach(logger, cfg.log_level)
    return get_logger("batterybridge")


def set_verbosity(level: str = "INFO"):
    """Change verbosity for all loggers."""
    lvl = getattr(logging, str(level).upper(), DEFAULT_LOG_LEVEL)
    for logger in _LOGGERS.values():
        logger.setLevel(lvl)
    for handler in _HANDLERS:
        handler.setLevel(lvl)


def log_traceback(logger: logging.Logger = None, exc: BaseException = None, msg: str = "Unhandled Exception"):
    """Log traceback with optional message."""
    import traceback as tb
    logger = logger or get_logger()
    exc_info = sys.exc_info() if exc is None else (type(exc), exc, exc.__traceback__)
    logger.error(f"{msg}\n{''.join(tb.format_exception(*exc_info))}")
