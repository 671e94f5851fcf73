"""
FILE: tasktrack/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH, OWNER_MAX_LENGTH
  - PRIORITY_OPTIONS, STATUS_OPTIONS, OWNER_SUGGESTIONS
  - DEFAULT_STATUS, DEFAULT_LISTING_STATUS
  - TABLE_NAME
DEPENDENCIES:
  - tasktrack.core.models (Priority, Status)
NOTES:
  - Reference lists are what the UI offers in pickers and completion
  - Owner suggestions are hints only; owner stays free text
"""

from .models import Priority, Status

# Field limits
TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 500
OWNER_MAX_LENGTH = 80

# Reference lists for the UI
PRIORITY_OPTIONS = tuple(Priority)
STATUS_OPTIONS = tuple(Status)
OWNER_SUGGESTIONS = ("João", "Maria", "Carlos", "Ana")

# Workflow defaults
DEFAULT_STATUS = Status.IN_PROGRESS
DEFAULT_LISTING_STATUS = Status.IN_PROGRESS

# Store
TABLE_NAME = "tasks"
