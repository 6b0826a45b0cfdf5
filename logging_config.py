import logging
import sys
from logging import Handler, Logger
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

# Pillow logs every PNG chunk at DEBUG while QR images are encoded
NOISY_LOGGERS = ('PIL', 'PIL.PngImagePlugin')


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _find_handler(logger: Logger, cls, filename: Optional[str] = None) -> Optional[Handler]:
    for h in logger.handlers:
        # RotatingFileHandler is a StreamHandler subclass, so match exact types
        if type(h) is not cls:
            continue
        if filename is None or str(getattr(h, 'baseFilename', '')).endswith(str(filename)):
            return h
    return None


def _attach(logger: Logger, handler: Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def setup_logging(log_level: Union[int, str] = logging.INFO, logfile: Optional[str] = 'app.log') -> Logger:
    """
    إعداد اللوق: مخرجات على stdout + ملف دوّار (5MB × 3).
    Safe to call once per create_app(); handlers are never duplicated, only
    their level is refreshed.
    """
    level = _resolve_level(log_level)
    root = logging.getLogger()
    root.setLevel(level)

    console = _find_handler(root, logging.StreamHandler)
    if console is None:
        _attach(root, logging.StreamHandler(sys.stdout), level)
    else:
        console.setLevel(level)

    if logfile:
        existing = _find_handler(root, RotatingFileHandler, filename=logfile)
        if existing is None:
            _attach(root, RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=3, encoding='utf-8'), level)
        else:
            existing.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    # Flask dev server requests go through the root handlers
    werk = logging.getLogger('werkzeug')
    werk.setLevel(logging.INFO)
    werk.propagate = True

    return root


if __name__ == "__main__":
    log = setup_logging(logging.DEBUG, logfile=None)
    log.info("تم إعداد اللوق بنجاح / Print service logging initialized")
