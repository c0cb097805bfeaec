"""Stage loggers for the term pipeline.

Every pipeline stage asks for its logger with ``setup_logging()`` and gets a
``vaultterms.<stage>`` logger named after the calling function. Messages may be
plain strings or structured values; structured values are pretty-printed so a
DEBUG dump of scan results stays readable:

    logger = setup_logging()
    logger.info(f"Scanning {len(paths)} documents")
    logger.debug({"message": "Top terms", "terms": top_terms}, pprint=True)

Pydantic models are rendered as indented JSON, and lists or tuples of models
as a JSON-ish list of their dumps.
"""

import inspect
import logging
from pprint import pformat
from typing import Any

from pydantic import BaseModel

NAMESPACE = "vaultterms"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_default_level = logging.INFO


def render(msg: Any, pprint: bool = True) -> str:
    """Turn a log message into text.

    Strings pass through untouched whatever ``pprint`` says.
    """
    if isinstance(msg, str):
        return msg
    if not pprint:
        return str(msg)
    if isinstance(msg, BaseModel):
        return msg.model_dump_json(indent=2)
    if isinstance(msg, (list, tuple)) and msg and all(isinstance(m, BaseModel) for m in msg):
        return pformat([m.model_dump(mode="json") for m in msg], width=120)
    return pformat(msg, width=120, depth=None)


class PprintLogger:
    """Wraps a stdlib logger so any level accepts structured messages.

    Anything that is not one of the level methods is forwarded to the
    wrapped logger, so ``logger.level``, ``logger.handlers`` and
    ``logger.setLevel`` work as usual.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _emit(self, level: int, msg: Any, args: tuple, pprint: bool, kwargs: dict) -> None:
        if not self._logger.isEnabledFor(level):
            return
        # stacklevel 3 skips _emit and the level method, so records point at the caller
        self._logger.log(level, render(msg, pprint), *args, stacklevel=3, **kwargs)

    def debug(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._emit(logging.DEBUG, msg, args, pprint, kwargs)

    def info(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._emit(logging.INFO, msg, args, pprint, kwargs)

    def warning(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._emit(logging.WARNING, msg, args, pprint, kwargs)

    def error(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._emit(logging.ERROR, msg, args, pprint, kwargs)

    def critical(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        self._emit(logging.CRITICAL, msg, args, pprint, kwargs)

    def exception(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log at ERROR with the active exception's traceback attached."""
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, pprint, kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._logger, name)


def _stage_loggers() -> list[logging.Logger]:
    prefix = NAMESPACE + "."
    return [
        logger
        for logger in logging.Logger.manager.loggerDict.values()
        if isinstance(logger, logging.Logger) and logger.name.startswith(prefix)
    ]


def set_default_level(level: int) -> None:
    """Set the level used by setup_logging() calls that pass no level.

    Stage loggers that already exist, and their handlers, are updated too.
    """
    global _default_level
    _default_level = level
    for logger in _stage_loggers():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def setup_logging(level: int | None = None, name: str | None = None) -> PprintLogger:
    """Return the PprintLogger for a pipeline stage.

    Args:
        level: Logger level. Defaults to the level set by set_default_level().
        name: Stage name. Defaults to the calling function's name.
    """
    if level is None:
        level = _default_level
    if name is None:
        caller = inspect.currentframe().f_back  # type: ignore[union-attr]
        name = caller.f_code.co_name  # type: ignore[union-attr]
    logger = logging.getLogger(f"{NAMESPACE}.{name}")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return PprintLogger(logger)
