"""Custom exceptions for the document-store boundary."""

from tasktrack.services.results import GatewayError


class StorageError(GatewayError):
    """Raised when a task read or write fails, including updates/deletes of missing ids."""

    kind = "storage"
