"""
Vocabulary catalog reads. Items and sentences are seeded once and never
changed by the application.
"""

import logging
from typing import Optional, List, Dict, Any

import psycopg2

from config.languages import SourceLanguage
from services.errors import VocabularyItemNotFoundError, StorageError
from utils.database import db_fetch_one, db_fetch_all

logger = logging.getLogger(__name__)

VOCABULARY_COLUMNS = """
    id, amharic_word, german_word, english_word, french_word, spanish_word, lesson
"""


def get_vocabulary_item(vocabulary_id: int) -> Dict[str, Any]:
    """
    Raises:
        VocabularyItemNotFoundError: If no item has this id
    """
    try:
        item = db_fetch_one(f"""
            SELECT {VOCABULARY_COLUMNS}
            FROM vocabulary
            WHERE id = %s
        """, (vocabulary_id,))
    except psycopg2.Error as e:
        raise StorageError(operation='get_vocabulary_item') from e

    if item is None:
        raise VocabularyItemNotFoundError(vocabulary_id)
    return item


def list_vocabulary(lesson: Optional[str] = None) -> List[Dict[str, Any]]:
    query = f"SELECT {VOCABULARY_COLUMNS} FROM vocabulary"
    params = ()
    if lesson:
        query += " WHERE lesson = %s"
        params = (lesson,)
    query += " ORDER BY lesson, id"

    try:
        return db_fetch_all(query, params)
    except psycopg2.Error as e:
        raise StorageError(operation='list_vocabulary') from e


def list_sentences() -> List[Dict[str, Any]]:
    """Fill-in-the-blank sentences seeded alongside the vocabulary."""
    try:
        return db_fetch_all("SELECT id, german, amharic, blank FROM sentences ORDER BY id")
    except psycopg2.Error as e:
        raise StorageError(operation='list_sentences') from e


def list_lessons() -> List[Dict[str, Any]]:
    try:
        return db_fetch_all("""
            SELECT lesson, COUNT(*) AS item_count
            FROM vocabulary
            GROUP BY lesson
            ORDER BY lesson
        """)
    except psycopg2.Error as e:
        raise StorageError(operation='list_lessons') from e


def get_random_item(source_language: SourceLanguage) -> Optional[Dict[str, Any]]:
    """Pick any item that has a term in the source language, or None."""
    source_column = source_language.column
    try:
        return db_fetch_one(f"""
            SELECT id, amharic_word AS target_term, {source_column} AS source_term, lesson
            FROM vocabulary
            WHERE {source_column} IS NOT NULL AND {source_column} <> ''
            ORDER BY RANDOM()
            LIMIT 1
        """)
    except psycopg2.Error as e:
        raise StorageError(operation='get_random_item') from e
