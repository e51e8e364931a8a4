"""
Procurement Errors
Service-layer error taxonomy, mapped to HTTP responses in main.py
"""

from fastapi import status


class ProcurementError(Exception):
    """Base class for service-layer errors"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ProcurementError):
    """Requested record does not exist"""
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(ProcurementError):
    """No authenticated identity"""
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ProcurementError):
    """Actor lacks the role or ownership required for the action"""
    status_code = status.HTTP_403_FORBIDDEN


class InvalidStateError(ProcurementError):
    """Action is not allowed from the record's current status"""
    status_code = status.HTTP_409_CONFLICT


class BudgetExceededError(ProcurementError):
    """Requested commitment exceeds the remaining budget of a cost center"""
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(ProcurementError):
    """Malformed input"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
