"""
Domain exceptions raised by services and mapped to HTTP responses by routes
"""
from typing import Any, Optional


class NotFoundException(Exception):
    """
    Exception raised when an entity id has no match
    """
    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        self.message = f"{entity} not found"
        super().__init__(self.message)


class InvalidStateException(Exception):
    """
    Exception raised when an operation is not legal from the current status
    """
    def __init__(self, message: str, current_status: Optional[str] = None):
        self.message = message
        self.current_status = current_status
        super().__init__(self.message)


class ValidationException(Exception):
    """
    Exception raised when business-rule validation fails

    Carries the full list of field errors; nothing is applied when raised.
    """
    def __init__(self, errors: list, message: str = "Validation failed"):
        self.errors = errors
        self.message = message
        super().__init__(self.message)


class InvalidParameterException(Exception):
    """
    Exception raised for malformed query or filter parameters
    """
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class ConflictException(Exception):
    """
    Exception raised when a write collides with an existing record
    """
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)
