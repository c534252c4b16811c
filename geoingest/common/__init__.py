from .json import json  # noqa: F401, I251
