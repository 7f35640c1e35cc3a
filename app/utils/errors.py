"""
Weekly Planner API - Custom Exception Classes.

Exception hierarchy for application error handling.
"""

from typing import Optional


class PlannerException(Exception):
    """
    Base exception class for the weekly planner.

    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code for the error.
        detail: Additional error details.
    """

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        detail: Optional[str] = None
    ):
        """
        Initialize PlannerException.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code (default 500).
            detail: Additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.detail = detail or message
        super().__init__(self.message)


class ProfileUnavailableError(PlannerException):
    """
    Exception raised when the user profile cannot be fetched.

    The profile is a hard prerequisite for plan generation, so this
    aborts the whole operation.
    """

    def __init__(
        self,
        message: str = "Failed to fetch user data",
        detail: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=502,
            detail=detail
        )


class NotFoundError(PlannerException):
    """
    Exception raised when a resource is not found.

    Used when:
    - Plan id does not exist
    - No plan stored for the requested week
    """

    def __init__(
        self,
        message: str = "Resource not found",
        detail: Optional[str] = None
    ):
        """
        Initialize NotFoundError.

        Args:
            message: Error message.
            detail: Additional details.
        """
        super().__init__(
            message=message,
            status_code=404,
            detail=detail
        )


class ValidationError(PlannerException):
    """
    Exception raised for input validation failures.

    Used when:
    - Unknown day names
    - Adaptation input inconsistent with the stored plan
    - Completing or skipping a rest day
    """

    def __init__(
        self,
        message: str = "Validation error",
        detail: Optional[str] = None
    ):
        """
        Initialize ValidationError.

        Args:
            message: Error message.
            detail: Additional details.
        """
        super().__init__(
            message=message,
            status_code=400,
            detail=detail
        )
