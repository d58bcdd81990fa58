"""
Custom exceptions for the chore tracker application.
Provides specific exception types for better error handling.
"""


class ChoreTrackerException(Exception):
    """Base exception for chore tracker application"""
    pass


class KidNotFoundException(ChoreTrackerException):
    """Raised when a kid is not found"""
    def __init__(self, kid_id: int):
        self.kid_id = kid_id
        super().__init__(f"Kid with ID {kid_id} not found")


class ChoreNotFoundException(ChoreTrackerException):
    """Raised when a chore definition is not found"""
    def __init__(self, chore_id: int):
        self.chore_id = chore_id
        super().__init__(f"Chore with ID {chore_id} not found")


class ExtraTaskNotFoundException(ChoreTrackerException):
    """Raised when an extra task is not found or belongs to another kid"""
    def __init__(self, task_id: int, kid_id: int = None):
        self.task_id = task_id
        self.kid_id = kid_id
        if kid_id is None:
            super().__init__(f"Extra task with ID {task_id} not found")
        else:
            super().__init__(f"Extra task with ID {task_id} not found for kid {kid_id}")


class DatabaseException(ChoreTrackerException):
    """Raised when database operations fail"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class ValidationException(ChoreTrackerException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")


NOT_FOUND_EXCEPTIONS = (KidNotFoundException, ChoreNotFoundException, ExtraTaskNotFoundException)
