"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  3xxx: Order
  6xxx: CRUD operation outcome (data rules, references, locking)
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        super().__init__(message)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin role required", 403)


# --- 6xxx: CRUD operation outcome ---
#
# The entity presenter classifies exactly these failures into user-facing
# message categories. Repositories and services raise them; nothing else
# needs to know which storage engine produced the failure.

class ValidationError(AppError):
    """Base for failures the user can correct by changing the input."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


class UserFriendlyDataError(ValidationError):
    """Application-level rule violation; the message is shown as is."""

    def __init__(self, message: str) -> None:
        super().__init__(6001, message)


class RequiredFieldsMissingError(ValidationError):
    def __init__(self, detail: str = "Required fields missing") -> None:
        super().__init__(6005, detail)


class ReferenceIntegrityError(AppError):
    def __init__(self, detail: str = "Operation prevented by references") -> None:
        super().__init__(6002, detail, 409)


class ConcurrentUpdateError(AppError):
    def __init__(self, entity_name: str, entity_id: int | None) -> None:
        super().__init__(
            6003, f"{entity_name} {entity_id} was modified concurrently", 409
        )


class EntityNotFoundError(AppError):
    def __init__(self, entity_name: str, entity_id: int | None) -> None:
        super().__init__(6004, f"{entity_name} not found: {entity_id}", 404)


class ConfirmationRequiredError(AppError):
    """Raised by routers when a destructive operation awaits confirmation."""

    def __init__(self, message: str, dialog: dict[str, str]) -> None:
        super().__init__(6006, message, 409, data={"confirmation": dialog})


class OperationFailedError(AppError):
    """A presenter operation was reported as failed through its view."""

    def __init__(self, message: str, persistent: bool, http_status: int) -> None:
        super().__init__(6007, message, http_status, data={"persistent": persistent})


class FieldValidationError(AppError):
    def __init__(self, invalid_fields: list[str]) -> None:
        super().__init__(
            6008,
            "Field validation failed",
            422,
            data={"invalid_fields": invalid_fields, "focus": invalid_fields[0]},
        )


# --- 3xxx: Order ---

class InvalidStateTransitionError(UserFriendlyDataError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Order state cannot change from {current} to {requested}"
        )
        self.code = 3001

