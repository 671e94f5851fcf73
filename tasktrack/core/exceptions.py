"""
FILE: tasktrack/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - TaskTrackError (base exception)
  - TaskNotFoundError
  - InvalidInputError
  - StoreError
  - ConfigurationError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from TaskTrackError for easy catching
  - Validation failures are NOT exceptions; they travel as Violation objects
  - Store and workflow treat a missing id as a no-op; only UI lookups raise
    TaskNotFoundError
"""


class TaskTrackError(Exception):
    """Base exception for all tasktrack errors."""
    pass


class TaskNotFoundError(TaskTrackError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class InvalidInputError(TaskTrackError):
    """Input could not be parsed or used."""

    def __init__(self, message: str):
        super().__init__(message)


class StoreError(TaskTrackError):
    """A store operation failed and its transaction was rolled back."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        super().__init__(f"Store operation '{operation}' failed: {cause}")


class ConfigurationError(TaskTrackError):
    """No usable datastore could be set up at start-up."""
    pass
