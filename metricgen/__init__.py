"""metricgen - compile metric declaration blocks into Python accessors.

    from metricgen import compile_source, MetricgenError
"""
from .compiler import compile_source, load_module, parse_source
from .errors import MetricgenError
from .version import __version__, get_version

__all__ = [
    "compile_source",
    "load_module",
    "parse_source",
    "MetricgenError",
    "__version__",
    "get_version",
]
