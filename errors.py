"""
Errors Module - Exception taxonomy shared by storage, validation and routes

Every exception carries the HTTP status and the message that the API
boundary puts into the response envelope.
"""


class PortfolioError(Exception):
    """Base class for all application errors"""
    status_code = 500
    public_message = 'An error occurred. Please try again.'

    def __init__(self, message=None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(PortfolioError):
    """Malformed create/update payload"""
    status_code = 400
    public_message = 'Invalid request data'


class UnauthorizedError(PortfolioError):
    """Missing or incorrect admin credentials"""
    status_code = 401
    public_message = 'Unauthorized'


class NotFoundError(PortfolioError):
    """Referenced id or slug does not exist"""
    status_code = 404
    public_message = 'Not found'


class StorageError(PortfolioError):
    """Underlying store failure; detail is logged, never returned"""
    status_code = 500


class ConflictError(StorageError):
    """Uniqueness violation at the store level (duplicate slug, username)"""
    status_code = 409
    public_message = 'Resource already exists'


__all__ = [
    'PortfolioError',
    'ValidationError',
    'UnauthorizedError',
    'NotFoundError',
    'StorageError',
    'ConflictError'
]
