# === FILE: render_scout/logger.py ===
"""Логирование RenderScout.

Все модули пишут в один именованный логгер ``RenderScout``::

    from render_scout.logger import logger
    logger.info("Rendered %s -> %d", url, status)

Вывод идёт в stderr: stdout CLI занят HTML-разметкой или JSON.
По запросу добавляется файл с ротацией (``--log-file``).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

LOGGER_NAME: Final[str] = "RenderScout"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# ротация файла журнала: 5 МБ, три архива
_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _build_handlers(log_file: Optional[Union[str, Path]], fmt: str) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(path),
                maxBytes=_FILE_MAX_BYTES,
                backupCount=_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def init_logging(
    level: _LevelT = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Перенастраивает логгер пакета: старые обработчики закрываются и заменяются.

    Вызывается при импорте и повторно из CLI, поэтому повторный вызов
    не должен дублировать вывод.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(log_file, log_format):
        lg.addHandler(handler)
    lg.propagate = False
    return lg


logger: logging.Logger = init_logging()

__all__ = ["LOGGER_NAME", "DEFAULT_FORMAT", "logger", "init_logging"]
