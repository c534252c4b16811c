from geoingest.common.exceptions import MissingDependencyException

try:
    import numpy  # noqa: I251
except ModuleNotFoundError:
    raise MissingDependencyException("geoingest numpy helpers", ["numpy"])
