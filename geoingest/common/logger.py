"""Package logger.

Unknown attributes of this module forward to the `geoingest` logger, ie. `logger.info(...)`. All
calls are ignored until `init_logging_from_config` configures the logger.
"""
import logging
import traceback
from logging import LogRecord, Logger
from typing import Any, Literal, Protocol

import json_logging

from geoingest.common.json import json
from geoingest.common.typing import StrAny, StrStr
from geoingest.common.configuration.specs import RunConfiguration
from geoingest.common.runtime import version_info

GEOINGEST_LOGGER_NAME = "geoingest"
METRICS_LEVEL = logging.WARNING - 2
"""Level of `metrics` records, between INFO and WARNING"""
LOGGER: Logger = None
TMetricsCategory = Literal["start", "progress", "stop"]


class LogMethod(Protocol):
    def __call__(self, msg: str, *args: Any, **kwds: Any) -> None:
        ...


def __getattr__(name: str) -> LogMethod:
    """Forwards log method calls (debug, info, error etc.) to LOGGER"""

    def wrapper(msg: str, *args: Any, **kwargs: Any) -> None:
        if LOGGER:
            # skip stack frames when displaying log so the original logging frame is displayed
            stacklevel = 2
            if name == "exception":
                # exception has one more frame
                stacklevel = 3
            getattr(LOGGER, name)(msg, *args, **kwargs, stacklevel=stacklevel)

    return wrapper


def metrics(category: TMetricsCategory, name: str, values: StrAny, stacklevel: int = 2) -> None:
    """Logs `values` measured for `name` (ie. a source url) at the METRICS level"""
    if LOGGER:
        LOGGER.log(
            METRICS_LEVEL, f"{category}:{name}", extra={"metrics": values}, stacklevel=stacklevel
        )


class _MetricsFormatter(logging.Formatter):
    """Text formatter that appends metrics values as json"""

    def format(self, record: LogRecord) -> str:  # noqa: A003
        s = super().format(record)
        values = getattr(record, "metrics", None)
        if values is not None:
            s = f"{s}: {json.dumps(values)}"
        return s


class _VersionFilter(logging.Filter):
    """Attaches version info to records, json formatter writes `props` into the log object"""

    def __init__(self, version: StrStr) -> None:
        super().__init__()
        self.version = version

    def filter(self, record: LogRecord) -> bool:  # noqa: A003
        record.props = {"version": self.version}
        return True


def _init_logging(logger_name: str, level: str, fmt: str, component: str, version: StrStr) -> Logger:
    logger = logging.getLogger(logger_name)
    logger.propagate = False
    logger.setLevel(level)
    # get or create logging handler
    handler = next(iter(logger.handlers), None)
    if handler is None:
        handler = logging.StreamHandler()
        logger.addHandler(handler)
    for version_filter in [f for f in logger.filters if isinstance(f, _VersionFilter)]:
        logger.removeFilter(version_filter)

    if is_json_logging(fmt):
        json_logging.COMPONENT_NAME = component
        json_logging.JSON_SERIALIZER = json.dumps
        logger.addFilter(_VersionFilter(version))
        # replaces formatters of all existing loggers
        json_logging.init_non_web(enable_json=True)
    else:
        handler.setFormatter(_MetricsFormatter(fmt=fmt, style="{"))

    return logger


def init_logging_from_config(C: RunConfiguration) -> None:
    """Configures the package logger with level, format and component name from `C`"""
    global LOGGER

    logging.addLevelName(METRICS_LEVEL, "METRICS")
    LOGGER = _init_logging(
        GEOINGEST_LOGGER_NAME, C.log_level, C.log_format, C.component_name, version_info(C)
    )


def is_logging() -> bool:
    return LOGGER is not None


def log_level() -> str:
    if not LOGGER:
        raise RuntimeError("Logger not initialized")
    return logging.getLevelName(LOGGER.level)  # type: ignore


def is_json_logging(log_format: str) -> bool:
    return log_format == "JSON"


def pretty_format_exception() -> str:
    return traceback.format_exc()
