"""Compiler entry points: source text in, Python module text out.

    text -> tokenize -> parse_module -> render_module -> text

Each call is independent and keeps no state. The first syntax or
validation error is raised as a located ``MetricgenError`` and nothing is
returned; errors are never collected across declarations.
"""
from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import types

from metricgen.compiler.ast_nodes import Module
from metricgen.compiler.codegen import render_module
from metricgen.compiler.lexer import TokenCursor
from metricgen.compiler.parser import expect_end, parse_module

logger = logging.getLogger(__name__)


class GeneratedModuleLoader(importlib.abc.InspectLoader):
    """Serves one generated module from memory.

    ``get_source`` keeps the generated text reachable for ``inspect`` and
    tracebacks; ``exec_module`` is inherited from ``InspectLoader``.
    """

    def __init__(self, source: str, filename: str):
        self.source = source
        self.filename = filename

    def get_source(self, fullname: str) -> str:
        return self.source

    def get_code(self, fullname: str) -> types.CodeType:
        return self.source_to_code(self.source, self.filename)

    def is_package(self, fullname: str) -> bool:
        return False


def parse_source(text: str) -> Module:
    """Parse one declaration block into a ``Module``."""
    cursor = TokenCursor.from_source(text)
    module = parse_module(cursor)
    expect_end(cursor)
    return module


def compile_source(text: str) -> str:
    """Compile one declaration block into Python source text."""
    module = parse_source(text)
    generated = render_module(module)
    logger.debug("compiled block %s (%s -> %s chars)", module.name, len(text), len(generated))
    return generated


def load_module(text: str, module_name: str | None = None, filename: str = "<metricgen>") -> types.ModuleType:
    """Compile a declaration block and import the result as a fresh module.

    The module is not added to ``sys.modules``. ``module_name`` defaults to
    the block name.
    """
    block = parse_source(text)
    loader = GeneratedModuleLoader(render_module(block), filename)
    spec = importlib.util.spec_from_loader(module_name or block.name, loader, origin=filename)
    target = importlib.util.module_from_spec(spec)
    target.__file__ = filename
    loader.exec_module(target)
    logger.debug("loaded block %s as module %s", block.name, target.__name__)
    return target


__all__ = ["GeneratedModuleLoader", "parse_source", "compile_source", "load_module"]
