class DatabaseError(Exception):
    """Base exception for repository-level errors."""


class AnalysisTransitionError(DatabaseError):
    """Raised when an analysis row is missing or already in a terminal status."""
