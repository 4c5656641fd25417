"""Exception hierarchy shared by the exporter.

Upstream failures are split into transient ones (retried by the backoff
executor) and permanent ones (raised straight through).
"""


class ExportError(Exception):
    """Base class for all exporter errors."""


class ConfigurationError(ExportError):
    """Missing credentials or invalid user input."""


class ServiceError(ExportError):
    """An upstream API call failed."""


class ExternalServiceError(ServiceError):
    """Transient upstream failure: worth retrying."""


class RateLimitError(ExternalServiceError):
    """Upstream asked us to slow down."""


class PermanentServiceError(ServiceError):
    """Upstream rejected the request; retrying will not help."""
