import os
from datetime import date

# Generative text models
# Multi-level fallback chains per use case, tried in order until one succeeds
FALLBACK_CHAINS = {
    "sentence": [
        "google/gemini-2.0-flash-lite-001",   # Fast, good Amharic coverage
        "deepseek/deepseek-chat-v3.1",
        "openai/gpt-4o-mini"                  # Most reliable fallback
    ],
    "general": [
        "google/gemini-2.0-flash-lite-001",
        "openai/gpt-4o-mini"
    ]
}

# Spaced repetition (simplified SM-2 curve, binary correct/incorrect)
INITIAL_INTERVALS = [1, 6]  # New level 1: 1 day, new level 2: 6 days
INTERVAL_MULTIPLIER = 2.5   # Level 3+: round(current_level * 2.5), floor current_level + 1

# "Never reviewed" sentinel for next_review_date, always due
EPOCH_DATE = date(1970, 1, 1)

# Due batch size served per session
DUE_BATCH_SIZE = 20
MAX_DUE_BATCH_SIZE = 20

# Upper bound of the PostgreSQL INTEGER id columns
MAX_ITEM_ID = 2**31 - 1

# Flat experience award per completed session, independent of score
SESSION_COMPLETION_XP = int(os.getenv('SESSION_COMPLETION_XP', '10'))

# Exercise modes offered by the quiz UI
SESSION_MODES = {'vocabulary', 'matching', 'fill-blank', 'listening', 'speaking'}

# Calendar day boundaries are evaluated in this timezone
APP_TIMEZONE = os.getenv('APP_TIMEZONE', 'UTC')

# Dates on the wire carry no time-of-day
DATE_FORMAT = '%Y-%m-%d'

# Registration
MIN_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 50
