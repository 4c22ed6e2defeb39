"""Parse method registry.

Maps a parse method name to the parser class implementing it. Resolving a
method builds a fresh parser bound to the registry's store, so concurrent
parses never share a county binding or a scratch directory. New methods
are added with ``register`` without touching the lookup logic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from county_results_api.lib.results_parser.base import BaseResultsParser, ParserNotFoundError
from county_results_api.lib.results_parser.html_parser import HtmlResultsParser
from county_results_api.lib.results_parser.types import ParseMethod
from county_results_api.lib.results_parser.zip_parser import ZipResultsParser

if TYPE_CHECKING:
    from county_results_api.core.config import Settings
    from county_results_api.lib.results_store.base import ResultsStore


class ParserRegistry:
    """Strategy table from parse method name to parser class.

    Args:
        store: Results store injected into every parser built by ``resolve``.
        **parser_kwargs: Extra keyword arguments forwarded to each parser
            constructor (e.g. ``timeout``, ``user_agent``, ``scratch_root``).
    """

    def __init__(self, store: ResultsStore, **parser_kwargs: Any) -> None:
        self._store = store
        self._parser_kwargs = parser_kwargs
        self._parsers: dict[str, type[BaseResultsParser]] = {}

    @property
    def store(self) -> ResultsStore:
        return self._store

    def register(self, method: str, parser_cls: type[BaseResultsParser]) -> None:
        """Register a parser class under a method name.

        Args:
            method: Parse method name (e.g. "zip").
            parser_cls: Parser class (must subclass BaseResultsParser).
        """
        if method in self._parsers:
            logger.warning(f"Overwriting existing parser for method {method!r}")
        self._parsers[method] = parser_cls

    def methods(self) -> list[str]:
        """Return the registered method names, sorted."""
        return sorted(self._parsers)

    def resolve(self, method: str) -> BaseResultsParser:
        """Build a new parser for ``method``.

        The caller owns the returned parser and must call ``cleanup()`` (or
        use it as a context manager) when done.

        Raises:
            ParserNotFoundError: If no parser is registered for ``method``.
        """
        cls = self._parsers.get(method)
        if cls is None:
            raise ParserNotFoundError(method)
        return cls(self._store, **self._parser_kwargs)

    get_parser = resolve


def create_default_registry(store: ResultsStore, settings: Settings | None = None) -> ParserRegistry:
    """Registry with the built-in ZIP and HTML parsers.

    Args:
        store: Results store the parsers write to.
        settings: Optional settings supplying fetch timeout, user agent, and
            scratch directory.

    Returns:
        A populated ParserRegistry.
    """
    kwargs: dict[str, Any] = {}
    if settings is not None:
        kwargs = {
            "timeout": settings.fetch_timeout,
            "user_agent": settings.fetch_user_agent,
            "scratch_root": settings.scratch_dir,
        }
    registry = ParserRegistry(store, **kwargs)
    registry.register(ParseMethod.ZIP, ZipResultsParser)
    registry.register(ParseMethod.HTML, HtmlResultsParser)
    return registry
