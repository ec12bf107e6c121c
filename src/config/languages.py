"""
Source languages a vocabulary item can be drilled from.

Each language maps through a fixed table to the catalog column holding its
term. Queries pick the column from this table only, so a request parameter
never becomes part of SQL text.
"""

from enum import Enum
from typing import Optional


class SourceLanguage(Enum):
    GERMAN = 'de'
    ENGLISH = 'en'
    FRENCH = 'fr'
    SPANISH = 'es'

    @property
    def column(self) -> str:
        return SOURCE_LANGUAGE_COLUMNS[self]

    @property
    def display_name(self) -> str:
        return SOURCE_LANGUAGE_NAMES[self]


SOURCE_LANGUAGE_COLUMNS = {
    SourceLanguage.GERMAN: 'german_word',
    SourceLanguage.ENGLISH: 'english_word',
    SourceLanguage.FRENCH: 'french_word',
    SourceLanguage.SPANISH: 'spanish_word',
}

SOURCE_LANGUAGE_NAMES = {
    SourceLanguage.GERMAN: 'German',
    SourceLanguage.ENGLISH: 'English',
    SourceLanguage.FRENCH: 'French',
    SourceLanguage.SPANISH: 'Spanish',
}

SUPPORTED_SOURCE_LANGUAGES = {lang.value for lang in SourceLanguage}


def parse_source_language(code: Optional[str]) -> Optional[SourceLanguage]:
    """Return the SourceLanguage for an ISO code, or None if unsupported."""
    if not code:
        return None
    try:
        return SourceLanguage(code.strip().lower())
    except ValueError:
        return None
