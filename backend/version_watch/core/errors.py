from __future__ import annotations
"""Error taxonomy shared by the client and the compatibility core."""


class VersionWatchError(Exception):
    """Base class for every error raised by version-watch."""


class ConfigError(VersionWatchError):
    """Invalid configuration detected at startup. Always fatal."""


class InvalidRangeError(ConfigError):
    def __init__(self, expression: str, clause: str | None = None, reason: str | None = None) -> None:
        self.expression = expression
        self.clause = clause
        self.reason = reason
        detail = f"invalid version range {expression!r}"
        if clause is not None:
            detail += f": bad clause {clause!r}"
        if reason:
            detail += f" ({reason})"
        super().__init__(detail)


class VersionParseError(VersionWatchError):
    """A reported version string could not be parsed."""

    def __init__(self, raw: str | None, reason: str | None = None) -> None:
        self.raw = raw
        self.reason = reason
        detail = f"invalid version {raw!r}"
        if reason:
            detail += f": {reason}"
        super().__init__(detail)


class FetchError(VersionWatchError):
    """Transport, status or payload failure while fetching server info."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)
