"""Tree-sitter C# grammar discovery and per-thread parsers."""

from __future__ import annotations

import importlib
import threading

from tree_sitter import Language, Parser, Tree

from .config import DEFAULT_GRAMMAR
from .errors import ToolchainNotFoundError
from .logging import get_logger

logger = get_logger("toolchain")


class Toolchain:
    """Parses C# source into tree-sitter syntax trees.

    A ``Parser`` holds mutable state, so each worker thread gets its own.
    """

    def __init__(self, language: Language, grammar: str = DEFAULT_GRAMMAR) -> None:
        self.language = language
        self.grammar = grammar
        self._local = threading.local()

    def parse(self, source: bytes) -> Tree:
        return self._parser().parse(source)

    def _parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = Parser(self.language)
            self._local.parser = parser
        return parser


def locate_toolchain(grammar: str = DEFAULT_GRAMMAR) -> Toolchain:
    """Import the grammar package ``grammar`` and wrap its language."""
    try:
        module = importlib.import_module(grammar)
    except ImportError as exc:
        raise ToolchainNotFoundError(grammar, f"module not installed: {exc}") from exc

    language_factory = getattr(module, "language", None)
    if not callable(language_factory):
        raise ToolchainNotFoundError(grammar, "module does not expose language()")

    try:
        language = Language(language_factory())
    except (TypeError, ValueError) as exc:
        raise ToolchainNotFoundError(grammar, str(exc)) from exc

    logger.debug("Using grammar %s (ABI %s)", grammar, getattr(language, "abi_version", "?"))
    return Toolchain(language, grammar)


__all__ = ["Toolchain", "locate_toolchain"]
