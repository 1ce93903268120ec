"""
Domain exceptions for the property diary application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class PropDiaryError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(PropDiaryError):
    """Base exception for storage operations."""

    pass


class RecordNotFoundError(StorageError):
    """Base exception for a record missing from storage."""

    pass


class PropertyNotFoundError(RecordNotFoundError):
    """Property not found in storage."""

    def __init__(self, property_id: str):
        super().__init__(
            f"Property not found: {property_id}",
            code="PROPERTY_NOT_FOUND",
            details={"property_id": property_id},
        )


class UnitNotFoundError(RecordNotFoundError):
    """Unit not found in storage."""

    def __init__(self, unit_id: str):
        super().__init__(
            f"Unit not found: {unit_id}",
            code="UNIT_NOT_FOUND",
            details={"unit_id": unit_id},
        )


class TenancyNotFoundError(RecordNotFoundError):
    """Tenancy not found in storage."""

    def __init__(self, tenancy_id: str):
        super().__init__(
            f"Tenancy not found: {tenancy_id}",
            code="TENANCY_NOT_FOUND",
            details={"tenancy_id": tenancy_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Diary Exceptions
class DiaryError(PropDiaryError):
    """Base exception for diary operations."""

    pass


class DiaryEventNotFoundError(DiaryError):
    """Diary event is not currently active (or not archived, for restore)."""

    def __init__(self, event_id: str, scope: str = "active"):
        super().__init__(
            f"Diary event not found: {event_id}",
            code="DIARY_EVENT_NOT_FOUND",
            details={"event_id": event_id, "scope": scope},
        )


# Recycle Bin Exceptions
class RecycleBinError(PropDiaryError):
    """Base exception for recycle bin operations."""

    pass


class RecycleBinItemNotFoundError(RecycleBinError):
    """Item is not in the recycle bin."""

    def __init__(self, item_type: str, item_id: str):
        super().__init__(
            f"No {item_type} in the recycle bin with id: {item_id}",
            code="RECYCLE_BIN_ITEM_NOT_FOUND",
            details={"item_type": item_type, "item_id": item_id},
        )


# Validation Exceptions
class ValidationError(PropDiaryError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class InvalidItemTypeError(ValidationError):
    """Recycle bin item type is not supported."""

    def __init__(self, item_type: str, allowed: list[str]):
        super().__init__(
            field="item_type",
            message=f"Unsupported item type '{item_type}'. Allowed: {', '.join(allowed)}",
            value=item_type,
        )
        self.details.update({"allowed": allowed})


class ConfigurationError(PropDiaryError):
    """Configuration error."""

    pass
