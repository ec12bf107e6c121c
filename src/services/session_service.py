"""
Session Service - composition point for a practice session

Sequences the scheduling components for the three inbound events:
    get_due_batch     -> due_items_service
    submit_answer     -> vocabulary lookup + review_service (scheduler)
    complete_session  -> progress_service (streak + experience)

Every input is validated here before anything is written. No scheduling or
streak rule lives in this module.
"""

import logging
import uuid
from typing import Optional, List, Dict, Any

from config.config import SESSION_MODES, DUE_BATCH_SIZE, MAX_DUE_BATCH_SIZE, MAX_ITEM_ID
from config.languages import SourceLanguage, parse_source_language, SUPPORTED_SOURCE_LANGUAGES
from services.errors import ValidationError
from services import due_items_service, progress_service, review_service, vocabulary_service
from services.progress_service import SessionSummary

logger = logging.getLogger(__name__)


# =============================================================================
# VALIDATION
# =============================================================================

def validate_user_id(user_id: Any) -> str:
    if not user_id or not isinstance(user_id, str):
        raise ValidationError("user_id is required", field='user_id')
    try:
        return str(uuid.UUID(user_id))
    except ValueError:
        raise ValidationError("Invalid user_id format. Must be a valid UUID", field='user_id')


def validate_payload(data: Any) -> Dict[str, Any]:
    """JSON request body as a dict; a missing body is empty, anything else but an object is rejected."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _validate_int(value: Any, field: str, minimum: int, maximum: Optional[int] = None) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field=field)
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            raise ValidationError(f"{field} must be an integer", field=field)
    if not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if value < minimum:
        raise ValidationError(f"{field} must be at least {minimum}", field=field)
    if maximum is not None and value > maximum:
        raise ValidationError(f"{field} must be at most {maximum}", field=field)
    return value


def validate_vocabulary_id(vocabulary_id: Any) -> int:
    if vocabulary_id is None:
        raise ValidationError("vocabulary_id is required", field='vocabulary_id')
    return _validate_int(vocabulary_id, 'vocabulary_id', 1, MAX_ITEM_ID)


def validate_was_correct(was_correct: Any) -> bool:
    if not isinstance(was_correct, bool):
        raise ValidationError("was_correct must be true or false", field='was_correct')
    return was_correct


def validate_source_language(code: Any) -> SourceLanguage:
    language = parse_source_language(code) if isinstance(code, str) else None
    if language is None:
        raise ValidationError(
            f"Unsupported source_language '{code}'. Supported: {sorted(SUPPORTED_SOURCE_LANGUAGES)}",
            field='source_language'
        )
    return language


def validate_mode(mode: Any) -> str:
    if not isinstance(mode, str) or mode not in SESSION_MODES:
        raise ValidationError(
            f"Unknown mode '{mode}'. Supported: {sorted(SESSION_MODES)}",
            field='mode'
        )
    return mode


def validate_score(score: Any, total: Any) -> tuple:
    total = _validate_int(total, 'total_questions', 1)
    score = _validate_int(score, 'score', 0)
    if score > total:
        raise ValidationError("score cannot exceed total_questions", field='score')
    return score, total


def validate_batch_size(count: Any) -> int:
    if count is None or count == '':
        return DUE_BATCH_SIZE
    count = _validate_int(count, 'count', 1)
    return min(count, MAX_DUE_BATCH_SIZE)


# =============================================================================
# SESSION EVENTS
# =============================================================================

def get_due_batch(
    user_id: Any,
    source_language: Any,
    lesson: Optional[str] = None,
    count: Any = None
) -> List[Dict[str, Any]]:
    """Serve the next batch of due items; may be empty."""
    user_id = validate_user_id(user_id)
    language = validate_source_language(source_language)
    batch_size = validate_batch_size(count)

    return due_items_service.fetch_due_batch(user_id, language, lesson=lesson or None, batch_size=batch_size)


def get_due_count(user_id: Any, source_language: Any, lesson: Optional[str] = None) -> int:
    user_id = validate_user_id(user_id)
    language = validate_source_language(source_language)

    return due_items_service.count_due_items(user_id, language, lesson=lesson or None)


def submit_answer(user_id: Any, vocabulary_id: Any, was_correct: Any) -> Dict[str, Any]:
    """
    Record one answer and reschedule the item.

    Raises:
        ValidationError: Bad input, nothing written
        VocabularyItemNotFoundError: Unknown item, nothing written
    """
    user_id = validate_user_id(user_id)
    vocabulary_id = validate_vocabulary_id(vocabulary_id)
    was_correct = validate_was_correct(was_correct)

    vocabulary_service.get_vocabulary_item(vocabulary_id)

    return review_service.record_answer(user_id, vocabulary_id, was_correct)


def complete_session(user_id: Any, mode: Any, score: Any, total_questions: Any) -> SessionSummary:
    """
    Close a session. This is the only trigger for streak and experience
    updates; answers alone never move them.
    """
    user_id = validate_user_id(user_id)
    mode = validate_mode(mode)
    score, total_questions = validate_score(score, total_questions)

    return progress_service.record_session_completion(user_id, mode, score, total_questions)
