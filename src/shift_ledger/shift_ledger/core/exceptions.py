class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when an employee lacks permission for an action."""


class PreconditionViolation(DomainError):
    """Raised when a command does not apply to the current state.

    Slot occupied/unoccupied mismatch, missing equipment selection, absence
    exclusivity conflicts. Nothing has been mutated when this is raised.
    """


class ResourceConflict(DomainError):
    """Raised when selected equipment was taken before the command committed."""

    def __init__(self, message: str, *, equipment_id: str):
        super().__init__(message)
        self.equipment_id = equipment_id


class CaptureCancelled(DomainError):
    """Raised when photo capture is cancelled; the command was not committed."""
