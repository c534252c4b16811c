from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from geoingest.common.typing import StrAny, is_optional_type
from geoingest.common.configuration.providers.provider import ConfigProvider
from geoingest.common.configuration.specs.base_configuration import (
    BaseConfiguration,
    extract_inner_hint,
)
from geoingest.common.configuration.specs.config_providers_context import get_providers_context
from geoingest.common.configuration.utils import deserialize_value, log_traces
from geoingest.common.configuration.exceptions import (
    ConfigFieldMissingException,
    ConfigurationWrongTypeException,
    LookupTrace,
)

TConfiguration = TypeVar("TConfiguration", bound=BaseConfiguration)


def resolve_configuration(
    config: TConfiguration,
    *,
    sections: Tuple[str, ...] = None,
    explicit_value: StrAny = None,
    accept_partial: bool = False,
) -> TConfiguration:
    """Resolves all fields of `config` in place and returns it.

    Each field is taken from `explicit_value` mapping if present there and not None, then from config
    providers (environment variables first, then `config.toml`) and finally from the field default.
    Providers that support sections are queried with `sections` first and then with less and less
    specific sections, ie. `SOURCES__SPATIAL__CSV__DELIMITER`, `SOURCES__SPATIAL__DELIMITER`, ...

    Args:
        config: configuration instance to resolve
        sections: sections to look for the keys, defaults to the `__section__` of the config class
        explicit_value: values that take precedence over config providers
        accept_partial: do not raise if required fields are missing

    Raises:
        ConfigFieldMissingException: required fields could not be resolved
        ConfigValueCannotBeCoercedException: provider value does not match the field type
    """
    if not isinstance(config, BaseConfiguration):
        raise ConfigurationWrongTypeException(type(config))

    # do not resolve twice
    if config.is_resolved():
        return config

    if sections is None:
        sections = (config.__section__,) if config.__section__ else ()

    config.__exception__ = None
    try:
        _resolve_config_fields(config, explicit_value, sections)
        _call_method_in_mro(config, "on_resolved")
        config.__is_resolved__ = True
    except ConfigFieldMissingException as cm_ex:
        # store the ConfigFieldMissingException to have full info on traces of missing fields
        config.__exception__ = cm_ex
        if not accept_partial:
            raise
    except Exception as ex:
        # store the exception that happened in the resolution process
        config.__exception__ = ex
        raise

    return config


def _resolve_config_fields(
    config: BaseConfiguration, explicit_values: StrAny, sections: Tuple[str, ...]
) -> None:
    fields = config.get_resolvable_fields()
    unresolved_fields: Dict[str, Sequence[LookupTrace]] = {}

    for key, hint in fields.items():
        default_value = getattr(config, key, None)
        explicit_value = explicit_values.get(key) if explicit_values else None

        if explicit_value is not None:
            current_value = explicit_value
            traces: List[LookupTrace] = []
        else:
            value, traces = _resolve_single_value(key, hint, sections)
            log_traces(type(config).__name__, key, hint, value, traces)
            if value is not None:
                value = deserialize_value(key, value, extract_inner_hint(hint))
            current_value = default_value if value is None else value

        # collect unresolved fields
        if not is_optional_type(hint) and current_value is None:
            unresolved_fields[key] = traces
        # set resolved value in config
        if default_value is not current_value:
            setattr(config, key, current_value)

    if unresolved_fields:
        raise ConfigFieldMissingException(type(config).__name__, unresolved_fields)


def _call_method_in_mro(config: BaseConfiguration, method_name: str) -> None:
    # python multi-inheritance is cooperative and this would require that all configurations cooperatively
    # call each other class_method_name. this is not at all possible as we do not know which configs in the end will
    # be mixed together.

    # get base classes in order of derivation
    mro = type.mro(type(config))
    for c in mro:
        # check if this class implements on_resolved (skip pure inheritance to not do double work)
        if method_name in c.__dict__ and callable(getattr(c, method_name)):
            # pass right class instance
            c.__dict__[method_name](config)


def _resolve_single_value(
    key: str, hint: Type[Any], sections: Tuple[str, ...]
) -> Tuple[Optional[Any], List[LookupTrace]]:
    traces: List[LookupTrace] = []
    value = None
    # start looking from the top provider with most specific set of sections first
    for provider in get_providers_context().providers:
        value, provider_traces = resolve_single_provider_value(provider, key, hint, sections)
        traces.extend(provider_traces)
        if value is not None:
            # value found, ignore other providers
            break
    return value, traces


def resolve_single_provider_value(
    provider: ConfigProvider, key: str, hint: Type[Any], sections: Tuple[str, ...] = ()
) -> Tuple[Optional[Any], List[LookupTrace]]:
    traces: List[LookupTrace] = []

    if provider.supports_sections:
        ns = list(sections)
    else:
        # pass empty sections
        ns = []

    value = None
    while True:
        value, ns_key = provider.get_value(key, hint, *ns)
        traces.append(LookupTrace(provider.name, list(ns), ns_key, value))
        if value is not None:
            # value found, ignore further sections
            break
        if len(ns) == 0:
            # sections exhausted
            break
        # pop optional sections for less precise lookup
        ns.pop()

    return value, traces
