class StoreError(Exception):
    """Base error raised by the store; carries the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StoreError):
    status_code = 404


class ValidationError(StoreError):
    status_code = 400


class DuplicateError(StoreError):
    """Item already present (favorite, registration)."""

    status_code = 400


class ConflictError(StoreError):
    status_code = 409


class CapacityError(StoreError):
    status_code = 409


class AuthenticationError(StoreError):
    status_code = 401
