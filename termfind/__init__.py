"""Find-in-buffer for terminal and editor views: async search, stale-result dropping, match navigation."""

from termfind.config import FindSettings, load_settings, configure_logging
from termfind.coordinator import SearchCoordinator, MatchStatus
from termfind.dispatch import Dispatcher, ImmediateDispatcher, Outcome
from termfind.engine import BufferSearchEngine, LineSearchEngine, OwnedMatches, SearchableBuffer
from termfind.exceptions import FindError, ConfigError, EngineFailure, SurfaceGone, EngineTimeout
from termfind.match_set import Query, MatchSpan, MatchSet
from termfind.session import SearchSession, SessionState

__version__ = "1.0.0"
__all__ = [
    'SearchCoordinator',
    'MatchStatus',
    'SearchSession',
    'SessionState',
    'MatchSet',
    'MatchSpan',
    'Query',
    'BufferSearchEngine',
    'SearchableBuffer',
    'LineSearchEngine',
    'OwnedMatches',
    'Dispatcher',
    'ImmediateDispatcher',
    'Outcome',
    'FindSettings',
    'load_settings',
    'configure_logging',
    'FindError',
    'ConfigError',
    'EngineFailure',
    'SurfaceGone',
    'EngineTimeout',
]
