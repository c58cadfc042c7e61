"""Exception hierarchy for termfind.

Engine errors are absorbed by the coordinator and degrade to "no matches";
they exist so engine adapters can say *why* a search produced nothing.
"""

from __future__ import annotations


class FindError(Exception):
    """Base class for all termfind exceptions."""


class ConfigError(FindError):
    """Raised when settings fail to load or validate."""


class EngineFailure(FindError):
    """Raised by a buffer search engine when a search cannot complete."""


class SurfaceGone(EngineFailure):
    """The searchable surface was destroyed before the search ran."""


class EngineTimeout(EngineFailure):
    """The search did not finish within the configured timeout."""
