"""
Logging setup for the OguWatcher relay.
Console output uses the "[Tag] message" form; an optional file log adds timestamps.
"""
import logging
from pathlib import Path

ROOT_LOGGER = 'oguwatcher'


class TagFormatter(logging.Formatter):
    """Formatter exposing the last segment of the logger name as %(tag)s"""

    def format(self, record):
        record.tag = record.name.rsplit('.', 1)[-1]
        return super().format(record)


def get_logger(tag: str) -> logging.Logger:
    """Get a package logger, e.g. get_logger('Relay') -> oguwatcher.Relay"""
    return logging.getLogger(f'{ROOT_LOGGER}.{tag}')


def configure_logging(app):
    """Attach console (and optional file) handlers to the package logger"""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # create_app may run more than once per process (tests)
    if getattr(logger, '_oguwatcher_configured', False):
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(TagFormatter('[%(tag)s] %(message)s'))
    logger.addHandler(console_handler)

    log_dir = app.config.get('LOG_DIR')
    if log_dir:
        log_path = Path(log_dir)
        try:
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path / 'relay.log')
            file_handler.setFormatter(TagFormatter(
                '%(asctime)s | %(levelname)s | [%(tag)s] %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)
            logger.info(f"File logging enabled: {log_path / 'relay.log'}")
        except OSError as e:
            logger.warning(f"Could not open log directory {log_path}: {e}")

    logger._oguwatcher_configured = True
    return logger
