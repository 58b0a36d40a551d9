"""
Logging Configuration

scrollingcontent logs through the standard logging module under the
'scrollingcontent' logger and adds no output of its own. Applications that
want a diagnostic log of keyboard adjustments can turn on a rotating log file
with the log_to_file setting.
"""
import logging
import logging.handlers
from pathlib import Path

LOGGER_NAME = 'scrollingcontent'
LOG_FILE_NAME = 'scrollingcontent.log'


def default_log_dir() -> Path:
    return Path.home() / ".config" / "scrollingcontent" / "logs"


def _file_handler_for(package_logger: logging.Logger, log_file: Path):
    for handler in package_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler) and \
                Path(handler.baseFilename) == log_file:
            return handler
    return None


def setup_logging(log_dir: Path = None, log_level: int = logging.INFO) -> logging.Handler:
    """
    Attach a rotating log file to the package logger.

    Calling it again for the same directory only updates the level, so
    several managers sharing one settings object don't duplicate output.

    Args:
        log_dir: Directory for the log file (defaults to ~/.config/scrollingcontent/logs)
        log_level: Logging level (default: INFO)

    Returns:
        The file handler
    """
    if log_dir is None:
        log_dir = default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (log_dir / LOG_FILE_NAME).resolve()

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(log_level)

    file_handler = _file_handler_for(package_logger, log_file)
    if file_handler is None:
        # 10MB max, keep 5 backup files
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        package_logger.addHandler(file_handler)

    file_handler.setLevel(log_level)
    return file_handler


def configure_logging(settings, log_dir: Path = None):
    """Apply the logging part of KeyboardLayoutSettings. Returns the file handler, if any."""
    if not settings.log_to_file:
        return None
    return setup_logging(log_dir, logging.getLevelName(settings.log_level))
