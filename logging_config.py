import os
import logging
from logging.handlers import RotatingFileHandler


def resolve_log_dir():
    """Log directory: C:\\tmp\\lpn_lock_logs on Windows, /tmp/lpn_lock_logs elsewhere"""
    if os.name == 'nt':  # Windows
        return r'C:\tmp\lpn_lock_logs'
    return '/tmp/lpn_lock_logs'


def _rotating_handler(path, level, formatter, backup_count=5):
    handler = RotatingFileHandler(
        path,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(app, log_dir=None):
    """
    Configure logging for the LPN lock application.

    Writes three rotating logs: the main application log, an error-only log
    and a dedicated log for Manhattan WMS calls.
    """
    log_dir = log_dir or resolve_log_dir()

    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        logging.warning(f"Could not create log directory {log_dir}: {e}")
        log_dir = os.path.join(os.getcwd(), 'logs')
        os.makedirs(log_dir, exist_ok=True)

    main_log_file = os.path.join(log_dir, 'lpn_lock_application.log')
    error_log_file = os.path.join(log_dir, 'lpn_lock_errors.log')
    manhattan_log_file = os.path.join(log_dir, 'manhattan_integration.log')

    detailed_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s (%(funcName)s:%(lineno)d): %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    main_handler = _rotating_handler(main_log_file, logging.INFO, detailed_formatter)
    error_handler = _rotating_handler(error_log_file, logging.ERROR, detailed_formatter, backup_count=10)
    manhattan_handler = _rotating_handler(manhattan_log_file, logging.DEBUG, detailed_formatter)

    app.logger.setLevel(logging.DEBUG)
    app.logger.addHandler(main_handler)
    app.logger.addHandler(error_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(main_handler)
    root_logger.addHandler(error_handler)

    # Manhattan calls also reach the root handlers through propagation
    manhattan_logger = logging.getLogger('manhattan_integration')
    manhattan_logger.setLevel(logging.DEBUG)
    manhattan_logger.addHandler(manhattan_handler)

    # requests/urllib3 connection chatter
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    werkzeug_logger = logging.getLogger('werkzeug')
    werkzeug_logger.setLevel(logging.INFO)

    app.logger.info("="*80)
    app.logger.info(f"LPN Lock Application Started - Log Directory: {log_dir}")
    app.logger.info(f"Main Log: {main_log_file}")
    app.logger.info(f"Error Log: {error_log_file}")
    app.logger.info(f"Manhattan Log: {manhattan_log_file}")
    app.logger.info("="*80)

    return log_dir
