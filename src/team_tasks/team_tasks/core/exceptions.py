class DomainError(Exception):
    """Base exception for business rule violations.

    Subclasses carry the HTTP status the API reports them with.
    """

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400
    default_message = "Invalid request data"


class AuthenticationError(DomainError):
    """Raised when credentials are missing, wrong or no longer valid."""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    default_message = "Access denied"


class NotFoundError(DomainError):
    """Resource is absent or not owned by the caller."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(DomainError):
    status_code = 400
    default_message = "Resource already exists"


class UploadError(DomainError):
    status_code = 400
    default_message = "Upload rejected"


class InternalError(DomainError):
    status_code = 500
    default_message = "Internal server error"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid credentials"


class InvalidToken(AuthorizationError):
    default_message = "Invalid or expired token"


class DuplicateEmail(ConflictError):
    default_message = "User with this email already exists"


class DuplicateEntry(ConflictError):
    default_message = "Daily work entry already exists for this date"


class InvalidManagerCode(ValidationError):
    default_message = "Invalid manager code"


class InvalidAssignees(ValidationError):
    default_message = "One or more selected team members are invalid"


class TaskNotFound(NotFoundError):
    default_message = "Task not found"


class SubmissionNotFound(NotFoundError):
    default_message = "Submission not found"


class EntryNotFound(NotFoundError):
    default_message = "Daily work entry not found"


class MemberNotFound(NotFoundError):
    default_message = "Team member not found"


class TeamNotFound(NotFoundError):
    default_message = "Team not found"


class DuplicateRecordError(Exception):
    """Raised by repositories when a unique key rejects a write.

    ``key`` is the violated constraint name (see database/schema.sql).
    """

    def __init__(self, key: str):
        super().__init__(f"Duplicate value for {key}")
        self.key = key
