"""Domain exceptions for the AltSource repository server."""


class AltSourceError(Exception):
    """Base exception for all repository server errors."""


class NotFoundError(AltSourceError, LookupError):
    """Unknown app, file or download token (-> HTTP 404)."""


class ConfigurationError(AltSourceError):
    """The repository configuration cannot be loaded; fatal at startup."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid repository configuration {path}: {reason}")
