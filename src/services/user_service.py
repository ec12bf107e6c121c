import logging
import uuid
from typing import Dict, Any

import psycopg2
import psycopg2.errors
from werkzeug.security import generate_password_hash, check_password_hash

from services.errors import AuthenticationError, ConflictError, StorageError
from utils.database import db_cursor, db_fetch_one

logger = logging.getLogger(__name__)


def register_user(username: str, password: str) -> Dict[str, Any]:
    """
    Create a user account and its progress record in one transaction.

    This is the only place a user_progress row is ever created.

    Returns:
        dict with user_id and username

    Raises:
        ConflictError: If the username is taken
    """
    user_id = str(uuid.uuid4())
    password_hash = generate_password_hash(password)

    try:
        with db_cursor(commit=True) as cur:
            cur.execute("""
                INSERT INTO users (user_id, username, password_hash)
                VALUES (%s, %s, %s)
            """, (user_id, username, password_hash))

            cur.execute("""
                INSERT INTO user_progress (user_id, xp, current_streak, longest_streak, last_activity_date)
                VALUES (%s, 0, 0, 0, NULL)
            """, (user_id,))
    except psycopg2.errors.UniqueViolation as e:
        raise ConflictError(f"Username '{username}' is already taken") from e
    except psycopg2.Error as e:
        raise StorageError(operation='register_user') from e

    logger.info(f"✓ Registered user: user_id='{user_id}', username='{username}'")
    return {"user_id": user_id, "username": username}


def authenticate_user(username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair and return the user's profile and progress.

    Token issuance is left to the auth layer in front of this API.

    Raises:
        AuthenticationError: On unknown username or wrong password
    """
    try:
        user = db_fetch_one("""
            SELECT u.user_id, u.username, u.password_hash,
                   p.xp, p.current_streak, p.longest_streak, p.last_activity_date
            FROM users u
            LEFT JOIN user_progress p ON p.user_id = u.user_id
            WHERE u.username = %s
        """, (username,))
    except psycopg2.Error as e:
        raise StorageError(operation='authenticate_user') from e

    if user is None or not check_password_hash(user['password_hash'], password):
        logger.warning(f"Failed login attempt for username='{username}'")
        raise AuthenticationError()

    return {
        "user_id": str(user['user_id']),
        "username": user['username'],
        "xp": user['xp'] or 0,
        "current_streak": user['current_streak'] or 0,
        "longest_streak": user['longest_streak'] or 0,
        "last_activity_date": user['last_activity_date'],
    }
