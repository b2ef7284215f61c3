from typing import Any, Dict, List, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class InvalidStateError(AppException):
    """Requested transition does not match the session's current status."""
    def __init__(self, session_id: Optional[int], current_status: str, target_status: Optional[str] = None):
        self.session_id = session_id
        self.current_status = current_status
        self.target_status = target_status
        if target_status:
            message = f"Review session {session_id} cannot move from '{current_status}' to '{target_status}'"
        else:
            message = f"Review session {session_id} is '{current_status}' and cannot be modified"
        super().__init__(
            message=message,
            status_code=409,
            error_code="INVALID_SESSION_STATE",
            details={
                "session_id": session_id,
                "current_status": current_status,
                "target_status": target_status,
            }
        )


class IncompleteFormError(AppException):
    def __init__(self, session_id: int, missing_question_ids: List[int]):
        self.session_id = session_id
        self.missing_question_ids = list(missing_question_ids)
        super().__init__(
            message=f"{len(self.missing_question_ids)} required question(s) are unanswered",
            status_code=422,
            error_code="INCOMPLETE_FORM",
            details={"session_id": session_id, "missing_question_ids": self.missing_question_ids}
        )


class DuplicateSessionError(AppException):
    def __init__(self, employee_id: int, cycle: str, existing_session_id: int):
        self.existing_session_id = existing_session_id
        super().__init__(
            message=f"Employee {employee_id} already has a review session for cycle {cycle}",
            status_code=409,
            error_code="DUPLICATE_SESSION",
            details={"employee_id": employee_id, "cycle": cycle, "session_id": existing_session_id}
        )


class DuplicateUserError(AppException):
    def __init__(self, email: str):
        super().__init__(
            message=f"A user with email {email} already exists",
            status_code=409,
            error_code="DUPLICATE_USER",
            details={"email": email}
        )


class StoreIOError(AppException):
    """Wraps any failure raised by the record store. Never retried by the core."""
    def __init__(self, operation: str, entity: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.entity = entity
        super().__init__(
            message=f"Record store failed during {operation} on {entity}",
            status_code=503,
            error_code="STORE_UNAVAILABLE",
            details={"operation": operation, "entity": entity, "cause": type(cause).__name__ if cause else None}
        )


class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity, "id": entity_id}
        )


class AnswerValidationError(AppException):
    def __init__(self, message: str, question_ids: Optional[List[Any]] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="INVALID_ANSWERS",
            details={"question_ids": question_ids or []}
        )


class OperationInProgressError(AppException):
    def __init__(self, key: str):
        super().__init__(
            message="This operation is already in progress. Please wait for it to finish.",
            status_code=409,
            error_code="OPERATION_IN_PROGRESS",
            details={"key": key}
        )


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )


class AuthenticationError(AppException):
    def __init__(self, message: str = "Missing or unknown user identity"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class InvalidParticipantError(AppException):
    def __init__(self, message: str, user_id: Optional[int] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="INVALID_PARTICIPANT",
            details={"user_id": user_id}
        )
