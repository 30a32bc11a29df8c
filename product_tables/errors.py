"""
Custom exceptions
"""


class ProductTablesError(Exception):
    """Base exception"""
    pass


class InvalidInput(ProductTablesError):
    """A required parameter is missing or malformed"""
    pass


class NotFound(ProductTablesError):
    """The requested entity does not exist upstream"""
    pass


class UpstreamUnavailable(ProductTablesError):
    """The upstream API failed, timed out, or the feature is not licensed"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)
