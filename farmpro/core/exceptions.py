from fastapi import HTTPException, status


class BaseAppException(HTTPException):  # <-- HTTPException, so handlers and routes can raise it as is
    """
    change response of exception to
        {
            "status": "error",
            "message": detail,
        }
    see the exception handler in farmpro.main
    """
    status_code = 500  # <-- defaults, overridden by subclasses
    detail = ""

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(status_code=self.status_code, detail=self.detail)


class ObjectNotFoundException(BaseAppException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Object not found"


class DuplicateObjectException(BaseAppException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Duplicate object"


class DatabaseException(BaseAppException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Database error"


class ValidationException(BaseAppException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Invalid input"


class InvalidStateException(BaseAppException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Operation is not allowed in the current state"


class AlreadyRunningException(InvalidStateException):
    detail = "Farming session already started"


class NoActiveSessionException(InvalidStateException):
    detail = "No active farming session"


class NotYetCompleteException(InvalidStateException):
    detail = "Farming not yet complete"


class AlreadyCompletedException(InvalidStateException):
    detail = "Task already completed"


class PolicyViolationException(BaseAppException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Operation violates policy"


class InsufficientBalanceException(PolicyViolationException):
    detail = "Insufficient balance"
