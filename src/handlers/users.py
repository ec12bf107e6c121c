from flask import jsonify, request
import logging

from config.config import MIN_PASSWORD_LENGTH, MAX_USERNAME_LENGTH
from services.errors import ValidationError
from services.progress_service import get_progress
from services.session_service import validate_user_id, validate_payload
from services.user_service import register_user, authenticate_user
from utils.clock import format_date

logger = logging.getLogger(__name__)


def _credentials(data):
    username = data.get('username')
    password = data.get('password')

    if not isinstance(username, str) or not isinstance(password, str) or not username.strip() or not password:
        raise ValidationError("username and password are required")

    return username.strip(), password


def register():
    """
    POST /api/users/register
    Request: {"username": "abebe", "password": "..."}
    Response (201): {"user_id": "uuid", "username": "abebe"}
    """
    username, password = _credentials(validate_payload(request.get_json(silent=True)))

    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"username must be at most {MAX_USERNAME_LENGTH} characters", field='username')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters", field='password')

    user = register_user(username, password)
    return jsonify({"message": "User registered successfully", **user}), 201


def login():
    """
    POST /api/users/login
    Request: {"username": "abebe", "password": "..."}
    """
    username, password = _credentials(validate_payload(request.get_json(silent=True)))

    user = authenticate_user(username, password)
    user['last_activity_date'] = format_date(user['last_activity_date'])
    return jsonify(user), 200


def get_user_progress(user_id):
    """GET /api/users/<user_id>/progress"""
    progress = get_progress(validate_user_id(user_id))

    return jsonify({
        "user_id": str(progress['user_id']),
        "xp": progress['xp'],
        "current_streak": progress['current_streak'],
        "longest_streak": progress['longest_streak'],
        "last_activity_date": format_date(progress['last_activity_date'])
    }), 200
