# ytwatch/errors.py
# Exception hierarchy. Everything raised on purpose derives from YtWatchError
# so the entry point can tell our failures apart from programming errors.

from __future__ import annotations


class YtWatchError(Exception):
    pass


class ConfigError(YtWatchError):
    """Bad or missing configuration; raised before any network call."""


class FetchError(YtWatchError):
    """A remote listing call failed (transport, HTTP status or payload)."""


class AuthError(FetchError):
    """Credentials were rejected or a token could not be obtained."""


class CycleError(YtWatchError):
    """A poll cycle was aborted. The cause is chained on __cause__."""


class CycleCancelled(YtWatchError):
    """The watcher was torn down while a cycle was in flight."""


class EmitError(YtWatchError):
    """The execution emitter could not accept a cycle result."""
