"""
logging_config.py — Console / file logging for the parser and the HTTP app.

Defaults come from funcviz.config, so the server is configured entirely
through FUNCVIZ_LOG_LEVEL and FUNCVIZ_LOG_FILE.  Flask's request log
(the 'werkzeug' logger) is routed through the same handlers so parse
fallbacks and the requests that caused them read as one stream.
"""
import logging
import sys

from .config import LOG_FILE, LOG_LEVEL

_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
_SHARED_LOGGERS = ('funcviz', 'werkzeug')


def _build_handlers(level, log_file):
    formatter = logging.Formatter(_FORMAT, datefmt='%H:%M:%S')
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        # Append: a restarted server keeps the history of the previous run
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level=LOG_LEVEL, log_file=LOG_FILE):
    """
    Attach fresh handlers to the 'funcviz' and 'werkzeug' loggers and
    return the 'funcviz' logger.  Safe to call again (e.g. on reload):
    previous handlers are closed and replaced, never stacked.
    """
    handlers = _build_handlers(level, log_file)
    for name in _SHARED_LOGGERS:
        logger = logging.getLogger(name)
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        logger.setLevel(level)
        logger.propagate = False
        for handler in handlers:
            logger.addHandler(handler)

    logger = logging.getLogger('funcviz')
    logger.debug('Logging to stdout%s at %s', f' and {log_file}' if log_file else '',
                 logging.getLevelName(level))
    return logger
