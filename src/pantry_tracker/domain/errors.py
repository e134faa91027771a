"""Domain error types surfaced to callers."""

from dataclasses import dataclass


class PantryError(Exception):
    """Base class for pantry tracker errors."""


class NotFoundError(PantryError):
    """Raised when an entity id does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


@dataclass(frozen=True)
class FieldError:
    """A single failed field check."""

    field: str
    message: str


class ValidationError(PantryError):
    """Raised when input fields fail validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__("; ".join(f"{err.field}: {err.message}" for err in errors))
        self.errors = errors


class InvalidArgumentError(PantryError):
    """Raised when an operation argument is out of range."""


class InternalError(PantryError):
    """Raised when the storage backend fails unexpectedly."""
