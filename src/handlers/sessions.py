from flask import jsonify, request
import logging

from services import session_service

logger = logging.getLogger(__name__)


def complete_session():
    """
    POST /api/sessions/complete

    Request:
        {"user_id": "uuid", "mode": "vocabulary", "score": 8, "total_questions": 10}

    Response:
        {"experience_awarded": 10, "total_experience": 120,
         "current_streak": 4, "longest_streak": 9}

    Calling this more than once on the same day awards experience each time
    but moves the streak only once.
    """
    data = session_service.validate_payload(request.get_json(silent=True))

    summary = session_service.complete_session(
        data.get('user_id'),
        data.get('mode'),
        data.get('score'),
        data.get('total_questions')
    )

    return jsonify(summary._asdict()), 200
