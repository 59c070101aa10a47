"""Exceptions raised by the user and sale services."""


class ServiceError(Exception):
    """Base class for every error the services raise."""

    default_message = "service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotFoundError(ServiceError):
    """No user exists with the requested identifier."""

    default_message = "user not found"


class SaleNotFoundError(ServiceError):
    """No sale exists with the requested identifier, or its user is missing."""

    default_message = "sale not found"


class EmptyIDError(ServiceError):
    """An entity without an identifier was handed to storage."""

    default_message = "empty user ID"


class InvalidInputError(ServiceError):
    """The supplied data failed validation."""

    default_message = "invalid input"


class NoFieldsToUpdateError(ServiceError):
    """An update request carried no fields to change."""

    default_message = "no fields to update"


class TransactionInvalidError(ServiceError):
    """The requested state transition is not allowed."""

    default_message = "transaccion invalida"