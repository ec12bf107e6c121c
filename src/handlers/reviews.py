"""
Review handlers

GET  /api/reviews/due         next batch of due items for a session
GET  /api/reviews/due-count   how many items are due right now
POST /api/reviews/answer      record one answer and reschedule the item
"""

from flask import jsonify, request
import logging

from services import session_service
from utils.clock import format_date, format_timestamp

logger = logging.getLogger(__name__)


def serialize_review_record(record):
    return {
        "user_id": str(record['user_id']),
        "vocabulary_id": record['vocabulary_id'],
        "srs_level": record['srs_level'],
        "next_review_date": format_date(record['next_review_date']),
        "last_reviewed_at": format_timestamp(record['last_reviewed_at'])
    }


def get_due_batch():
    """
    GET /api/reviews/due?user_id=XXX&source_language=de&lesson=greetings&count=20

    Response:
        {
            "user_id": "uuid",
            "source_language": "de",
            "lesson": "greetings",
            "items": [{"id": 1, "target_term": "ሰላም", "source_term": "Hallo", ...}],
            "count": 1
        }

    An empty "items" list means nothing is due.
    """
    user_id = request.args.get('user_id')
    source_language = request.args.get('source_language')
    lesson = request.args.get('lesson')

    items = session_service.get_due_batch(
        user_id, source_language, lesson=lesson, count=request.args.get('count')
    )

    return jsonify({
        "user_id": user_id,
        "source_language": source_language,
        "lesson": lesson,
        "items": [
            {
                "id": item['id'],
                "target_term": item['target_term'],
                "source_term": item['source_term'],
                "lesson": item['lesson'],
                "srs_level": item['srs_level'],
                "next_review_date": format_date(item['next_review_date'])
            }
            for item in items
        ],
        "count": len(items)
    }), 200


def get_due_count():
    """GET /api/reviews/due-count?user_id=XXX&source_language=de&lesson=..."""
    user_id = request.args.get('user_id')

    due_count = session_service.get_due_count(
        user_id, request.args.get('source_language'), lesson=request.args.get('lesson')
    )

    return jsonify({"user_id": user_id, "due_count": due_count}), 200


def submit_answer():
    """
    POST /api/reviews/answer

    Request:
        {"user_id": "uuid", "vocabulary_id": 12, "was_correct": true}

    Response:
        {"user_id": "uuid", "vocabulary_id": 12, "srs_level": 3,
         "next_review_date": "2024-01-06", "last_reviewed_at": "2024-01-01T12:00:00+00:00"}
    """
    data = session_service.validate_payload(request.get_json(silent=True))

    record = session_service.submit_answer(
        data.get('user_id'),
        data.get('vocabulary_id'),
        data.get('was_correct')
    )

    return jsonify(serialize_review_record(record)), 200
