# app/utils/errors.py
"""
Error types raised by the service layer and translated to HTTP responses by the routers
"""


class MaintenanceError(Exception):
    """Base class for service-layer errors"""


class InvalidQuery(MaintenanceError):
    """Search query is too short to run"""

    def __init__(self, message: str = "Search query must be at least 2 characters"):
        super().__init__(message)
        self.message = message


class StoreFailure(MaintenanceError):
    """A database read or write failed"""


class TransportFailure(MaintenanceError):
    """The outbound email transport could not deliver a message"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotFound(MaintenanceError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyUpdate(MaintenanceError):
    def __init__(self, message: str = "No fields to update"):
        super().__init__(message)
        self.message = message
