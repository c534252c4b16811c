from typing import Optional

from geoingest.version import __version__
from geoingest.common.typing import StrStr
from geoingest.common.configuration.specs import RunConfiguration
from geoingest.common.utils import filter_env_vars


def version_info(config: RunConfiguration) -> StrStr:
    """Package version, component name and build info found in environment"""
    info = {"geoingest_version": __version__, "component_name": config.component_name}
    # extract envs with build info
    info.update(filter_env_vars(["COMMIT_SHA", "IMAGE_VERSION"]))
    return info


def initialize_runtime(config: Optional[RunConfiguration] = None) -> RunConfiguration:
    """Initializes logging with `config` or with the `runtime` section of config providers"""
    from geoingest.common import logger
    from geoingest.common.configuration import resolve_configuration

    if config is None:
        config = resolve_configuration(RunConfiguration())
    logger.init_logging_from_config(config)
    return config
