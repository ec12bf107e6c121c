"""
Exception taxonomy for LinguaQuest.

Services raise these; middleware.error_handler turns them into JSON responses.
Nothing in the services catches them to retry.
"""

from typing import Optional, Dict, Any


class LinguaQuestError(Exception):
    """Base exception class for LinguaQuest."""

    status_code = 500
    error_type = 'internal_error'

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        payload = {
            'error': self.error_type,
            'message': self.message,
        }
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(LinguaQuestError):
    """Input rejected before any state was touched."""

    status_code = 400
    error_type = 'validation_error'

    def __init__(self, message: str = 'Validation failed', field: Optional[str] = None):
        super().__init__(message, details={'field': field} if field else None)


class NotFoundError(LinguaQuestError):
    """A record assumed to exist does not."""

    status_code = 404
    error_type = 'not_found'

    def __init__(self, message: str = 'Resource not found', resource: Optional[str] = None):
        super().__init__(message, details={'resource': resource} if resource else None)


class UserNotFoundError(NotFoundError):

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found", resource='user')


class VocabularyItemNotFoundError(NotFoundError):

    def __init__(self, vocabulary_id: int):
        self.vocabulary_id = vocabulary_id
        super().__init__(f"Vocabulary item {vocabulary_id} not found", resource='vocabulary')


class AuthenticationError(LinguaQuestError):
    status_code = 401
    error_type = 'authentication_failed'

    def __init__(self, message: str = 'Invalid credentials'):
        super().__init__(message)


class ConflictError(LinguaQuestError):
    status_code = 409
    error_type = 'conflict'


class StorageError(LinguaQuestError):
    """The backing store failed; the whole request is rejected."""

    status_code = 503
    error_type = 'storage_error'

    def __init__(self, message: str = 'Storage operation failed', operation: Optional[str] = None):
        super().__init__(message, details={'operation': operation} if operation else None)


class GenerationError(LinguaQuestError):
    """The generative-text service returned nothing usable."""

    status_code = 502
    error_type = 'generation_failed'
