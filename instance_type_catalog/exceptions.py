"""Custom exception hierarchy for the instance type catalog."""


class CatalogError(Exception):
    """Base exception for all catalog errors."""


class ConfigError(CatalogError):
    """Invalid or missing configuration, including a bad exclude-list entry."""


# Alias matching the name used in the design notes
ConfigurationError = ConfigError


class CatalogFetchError(CatalogError):
    """Enumerating instance types from the cloud catalog failed."""

    def __init__(self, message: str = "unable to fetch instance types", cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
