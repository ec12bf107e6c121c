from flask import jsonify
from datetime import datetime, timezone

from utils.database import check_database_health


def health_check():
    """Health check endpoint"""
    database_ok = check_database_health()
    status_code = 200 if database_ok else 503

    return jsonify({
        "status": "healthy" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }), status_code
