import ast
import inspect
from typing import Any, Sequence, Type

from geoingest.common import logger
from geoingest.common.json import json
from geoingest.common.typing import TAny
from geoingest.common.data_types import coerce_value, py_type_to_sc_type
from geoingest.common.configuration.exceptions import (
    ConfigValueCannotBeCoercedException,
    LookupTrace,
)
from geoingest.common.configuration.specs.base_configuration import COMPLEX_HINTS


def deserialize_value(key: str, value: Any, hint: Type[TAny]) -> TAny:
    """Converts `value` (typically a string from environment) into `hint` type"""
    try:
        if hint != Any:
            if inspect.isclass(hint) and issubclass(hint, COMPLEX_HINTS):
                if isinstance(value, str):
                    if hint is tuple:
                        # use literal eval for tuples
                        value = ast.literal_eval(value)
                    else:
                        # use json for sequences and mappings
                        value = json.loads(value)
                # toml arrays are lists
                if hint is tuple and isinstance(value, list):
                    value = tuple(value)
                # exact types must match
                if not isinstance(value, hint):
                    raise ValueError(value)
            else:
                # reuse data type coercion rules
                hint_dt = py_type_to_sc_type(hint)
                value_dt = py_type_to_sc_type(type(value))
                if value_dt != hint_dt:
                    value = coerce_value(hint_dt, value_dt, value)
        return value  # type: ignore
    except ConfigValueCannotBeCoercedException:
        raise
    except Exception as exc:
        raise ConfigValueCannotBeCoercedException(key, value, hint) from exc


def log_traces(
    config_name: str, key: str, hint: Type[Any], value: Any, traces: Sequence[LookupTrace]
) -> None:
    if logger.is_logging() and logger.log_level() == "DEBUG":
        logger.debug(
            f"Field {key} with type {hint} in {config_name}"
            f" {'NOT RESOLVED' if value is None else 'RESOLVED'}"
        )
        for tr in traces:
            logger.debug(str(tr))
