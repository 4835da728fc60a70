"""Service-level exceptions mapped to HTTP responses by the controllers."""


class ServiceError(Exception):
    """Base class carrying the HTTP status a controller should answer with."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or invalid request input."""
    status_code = 400


class NotFoundError(ServiceError):
    """The requested record does not exist."""
    status_code = 404


class StorageError(ServiceError):
    """The persistence layer raised; details are logged, never returned."""
    status_code = 500
