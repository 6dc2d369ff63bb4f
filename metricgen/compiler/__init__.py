"""
Compiler package - declaration blocks to Python metric accessors.

Usage:
    from metricgen.compiler import compile_source

    text = compile_source('''
        pub mod http_metrics {
            /// Requests served.
            #[description = "Requests served"]
            pub fn requests(route: str) -> Counter;
        }
    ''')
"""

from .ast_nodes import Declaration, Metadata, MetricKind, Module, Parameter
from .pipeline import compile_source, load_module, parse_source

__all__ = [
    "compile_source",
    "load_module",
    "parse_source",
    "Declaration",
    "Metadata",
    "MetricKind",
    "Module",
    "Parameter",
]
