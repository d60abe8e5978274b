"""Domain errors raised by the service layer and mapped to HTTP by the routers."""


class ServiceError(Exception):
    """Base class for expected, user-facing service failures."""

    message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidEmailError(ServiceError):
    message = "Invalid email format!"


class EmailAlreadyRegisteredError(ServiceError):
    message = "Email is already used!"


class UserNotFoundError(ServiceError):
    message = "No user with this email!"


class EmailNotVerifiedError(ServiceError):
    message = "Email is not verified!"


class AccountNotFoundError(ServiceError):
    message = "Account not found"


class TransactionNotFoundError(ServiceError):
    message = "Transaction not found"


class PasswordTooLongError(ServiceError):
    message = "Password is too long!"


class MemberNotFoundError(ServiceError):
    message = "Member not found"
