class ClubsError(Exception):
    """Base class for errors raised by the clubs client."""


class TransportError(ClubsError):
    """The request never produced a usable response (network error or malformed body)."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ConfigError(ClubsError):
    """The configuration file exists but could not be read."""
