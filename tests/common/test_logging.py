import io
import logging
from importlib.metadata import version as pkg_version
from os import environ
from typing import Iterator

import pytest

from geoingest.common import json, logger
from geoingest.common.configuration import configspec
from geoingest.common.configuration.specs import RunConfiguration
from geoingest.common.runtime import initialize_runtime, version_info
from geoingest.common.typing import StrStr

from tests.utils import preserve_environ


@configspec
class PureBasicConfiguration(RunConfiguration):
    component_name: str = "logger"
    log_level: str = "INFO"


@configspec
class JsonLoggerConfiguration(PureBasicConfiguration):
    log_format: str = "JSON"


@pytest.fixture(scope="function")
def environment() -> StrStr:
    environ.clear()

    return environ


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    saved_logger = logger.LOGGER
    try:
        yield
    finally:
        logger.LOGGER = saved_logger


def _capture_handler() -> logging.StreamHandler:
    """Adds a handler that writes to a buffer using the formatter set by logger init"""
    geoingest_logger = logging.getLogger(logger.GEOINGEST_LOGGER_NAME)
    handler = logging.StreamHandler(io.StringIO())
    handler.setFormatter(geoingest_logger.handlers[0].formatter)
    geoingest_logger.addHandler(handler)
    return handler


def _remove_handler(handler: logging.Handler) -> None:
    logging.getLogger(logger.GEOINGEST_LOGGER_NAME).removeHandler(handler)


def test_version_extract(environment: StrStr) -> None:
    version = version_info(PureBasicConfiguration())
    lib_version = pkg_version("geoingest")
    assert version == {"geoingest_version": lib_version, "component_name": "logger"}
    # mock image info available in container
    _mock_image_env(environment)
    version = version_info(PureBasicConfiguration())
    assert version == {
        "geoingest_version": lib_version,
        "commit_sha": "192891",
        "component_name": "logger",
        "image_version": "scale/v:112",
    }


def test_logging_not_initialized() -> None:
    logger.LOGGER = None
    assert logger.is_logging() is False
    # calls are ignored
    logger.info("not logged")
    logger.metrics("start", "source", {"rows": 0})
    with pytest.raises(RuntimeError):
        logger.log_level()


def test_text_logger_init(environment: StrStr) -> None:
    _mock_image_env(environment)
    logger.init_logging_from_config(PureBasicConfiguration())
    assert logger.is_logging()
    assert logger.log_level() == "INFO"
    assert logging.getLevelName(logging.WARNING - 2) == "METRICS"

    handler = _capture_handler()
    try:
        logger.metrics("stop", "data.csv", {"rows": 10})
        logger.debug("Debug message not shown")
        logger.warning("Warning message here")
        try:
            1 / 0
        except ZeroDivisionError:
            logger.exception("DIV")
    finally:
        _remove_handler(handler)

    output = handler.stream.getvalue()  # type: ignore[attr-defined]
    lines = output.splitlines()
    assert "stop:data.csv" in lines[0]
    assert lines[0].endswith(': {"rows":10}')
    assert "METRICS" in lines[0]
    assert "Debug message not shown" not in output
    assert "Warning message here" in output
    assert "ZeroDivisionError" in output


def test_json_logger_init(environment: StrStr) -> None:
    logger.init_logging_from_config(JsonLoggerConfiguration())
    assert logger.is_json_logging(JsonLoggerConfiguration().log_format)

    handler = _capture_handler()
    try:
        logger.warning("Warning message here")
        logger.metrics("progress", "data.geojson", {"rows": 5})
    finally:
        _remove_handler(handler)
    warning, metrics = [
        json.loads(line) for line in handler.stream.getvalue().splitlines()  # type: ignore[attr-defined]
    ]
    assert warning["msg"] == "Warning message here"
    assert warning["level"] == "WARNING"
    assert warning["version"]["geoingest_version"] == pkg_version("geoingest")
    assert warning["version"]["component_name"] == "logger"
    assert metrics["msg"] == "progress:data.geojson"
    assert metrics["level"] == "METRICS"
    assert metrics["metrics"] == {"rows": 5}

    # back to text format, version is no longer attached
    logger.init_logging_from_config(PureBasicConfiguration())
    geoingest_logger = logging.getLogger(logger.GEOINGEST_LOGGER_NAME)
    assert not geoingest_logger.filters


def test_initialize_runtime_from_environ(environment: StrStr) -> None:
    environment["RUNTIME__LOG_LEVEL"] = "DEBUG"
    config = initialize_runtime()
    assert config.log_level == "DEBUG"
    assert logger.log_level() == "DEBUG"
    # explicit configuration
    initialize_runtime(PureBasicConfiguration())
    assert logger.log_level() == "INFO"


def test_pretty_format_exception() -> None:
    try:
        raise ValueError("formatted")
    except ValueError:
        assert "ValueError: formatted" in logger.pretty_format_exception()


def _mock_image_env(environment: StrStr) -> None:
    environment["COMMIT_SHA"] = "192891"
    environment["IMAGE_VERSION"] = "scale/v:112"
