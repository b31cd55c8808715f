"""
Centralized Logging Configuration for the Dispute Draft service
"""
import os
import logging
import logging.handlers
from pathlib import Path

from utils.dispute_context import current_scope

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(dispute_id)s|%(account_id)s|%(phase)s] %(message)s'


class DisputeContextFilter(logging.Filter):
    """
    Stamp every record with the dispute, account and phase of the current request
    """

    def filter(self, record: logging.LogRecord) -> bool:
        scope = current_scope()
        record.dispute_id = scope.dispute_id or '-'
        record.account_id = scope.account_id or '-'
        record.phase = scope.phase or '-'
        return True


def setup_logging() -> logging.Logger:
    """
    Setup centralized logging configuration from environment variables
    """
    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_to_file = os.getenv('LOG_TO_FILE', 'false').lower() == 'true'
    log_to_console = os.getenv('LOG_TO_CONSOLE', 'true').lower() == 'true'
    log_file_path = os.getenv('LOG_FILE_PATH', 'logs/disputes.log')
    log_file_max_size = int(os.getenv('LOG_FILE_MAX_SIZE', '10485760'))
    log_file_backup_count = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))
    log_format = os.getenv('LOG_FORMAT', DEFAULT_LOG_FORMAT)

    formatter = logging.Formatter(log_format)
    context_filter = DisputeContextFilter()
    handlers = []

    if log_to_console:
        console_handler = logging.StreamHandler()
        handlers.append(console_handler)

    if log_to_file:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=log_file_max_size,
            backupCount=log_file_backup_count
        )
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        handler.addFilter(context_filter)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True
    )

    logger = logging.getLogger('disputedraft')
    logger.info("Centralized logging configured")
    logger.info(f"Log level: {log_level}")
    logger.info(f"Console logging: {'enabled' if log_to_console else 'disabled'}")

    if log_to_file:
        logger.info(f"File logging enabled: {log_path}")

    return logger

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name
    """
    return logging.getLogger(f'disputedraft.{name}')

def console_print(message: str, level: str = 'INFO'):
    """
    Print essential messages to console
    """
    if level.upper() == 'ERROR':
        print(f"ERROR: {message}")
    elif level.upper() == 'WARNING':
        print(f"WARNING: {message}")
    elif level.upper() == 'SUCCESS':
        print(f"SUCCESS: {message}")
    else:
        print(f"INFO: {message}")

_root_logger = None

def init_logging():
    """Initialize logging configuration once"""
    global _root_logger
    if _root_logger is None:
        _root_logger = setup_logging()
    return _root_logger
