# API Endpoints
# Every route the quiz front end talks to lives under /api

from flask import Blueprint
from handlers.reviews import get_due_batch, get_due_count, submit_answer
from handlers.sessions import complete_session
from handlers.users import register, login, get_user_progress
from handlers.vocabulary import get_vocabulary, get_lessons, get_generated_sentence
from handlers.admin import health_check

api = Blueprint('api', __name__, url_prefix='/api')

# ============================================================================
# PRACTICE SESSION
# ============================================================================

api.route('/reviews/due', methods=['GET'])(get_due_batch)
api.route('/reviews/due-count', methods=['GET'])(get_due_count)
api.route('/reviews/answer', methods=['POST'])(submit_answer)
api.route('/sessions/complete', methods=['POST'])(complete_session)

# ============================================================================
# USERS
# ============================================================================

api.route('/users/register', methods=['POST'])(register)
api.route('/users/login', methods=['POST'])(login)
api.route('/users/<user_id>/progress', methods=['GET'])(get_user_progress)

# ============================================================================
# CATALOG
# ============================================================================

api.route('/vocabulary', methods=['GET'])(get_vocabulary)
api.route('/lessons', methods=['GET'])(get_lessons)
api.route('/sentences/generate', methods=['GET'])(get_generated_sentence)

# ============================================================================
# ADMINISTRATIVE
# ============================================================================

api.route('/health', methods=['GET'])(health_check)
