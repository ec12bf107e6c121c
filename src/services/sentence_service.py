"""
Fill-in-the-blank sentence generation through the LLM fallback chain.

A random catalog item is handed to the model, which returns a short Amharic
sentence using the word (blanked out as ____) plus its translation in the
learner's source language.
"""

import json
import logging
from typing import Optional, Dict

from config.languages import SourceLanguage
from middleware.logging import log_error
from services.errors import GenerationError
from services.vocabulary_service import get_random_item
from utils.llm import llm_completion_with_fallback

logger = logging.getLogger(__name__)

BLANK_PLACEHOLDER = '____'

SYSTEM_PROMPT = (
    "You write short, simple practice sentences for beginners learning Amharic. "
    "Always answer with a JSON object."
)

USER_PROMPT_TEMPLATE = """Create a short, simple Amharic sentence using the Amharic word "{target_term}".
Provide the {language_name} translation of the sentence.
Return JSON with these fields:
- "source": the full {language_name} sentence
- "target": the Amharic sentence with "{target_term}" replaced by the placeholder {blank}
- "blank": the {language_name} word that fills the blank (this is "{source_term}")

Example (using water):
{{"source": "I drink water.", "target": "እኔ {blank} እጠጣለሁ።", "blank": "water"}}"""


def build_sentence_prompt(target_term: str, source_term: str, source_language: SourceLanguage) -> list:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(
                target_term=target_term,
                source_term=source_term,
                language_name=source_language.display_name,
                blank=BLANK_PLACEHOLDER,
            )
        }
    ]


def parse_sentence_output(content: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Parse the model's JSON answer into {source, target, blank}.

    Returns None when a field is missing or empty, or when the Amharic
    sentence has no blank placeholder.
    """
    if not content:
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None

    if not isinstance(data, dict):
        return None

    sentence = {}
    for field in ('source', 'target', 'blank'):
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            return None
        sentence[field] = value.strip()

    if BLANK_PLACEHOLDER not in sentence['target']:
        return None

    return sentence


def generate_sentence(source_language: SourceLanguage) -> Dict[str, str]:
    """
    Generate one fill-in-the-blank exercise.

    Returns:
        dict with source, target, blank and the vocabulary_id it was built from

    Raises:
        GenerationError: If no item is available or no model produced a usable sentence
    """
    item = get_random_item(source_language)
    if item is None:
        raise GenerationError(f"No vocabulary items available in {source_language.display_name}")

    content = llm_completion_with_fallback(
        messages=build_sentence_prompt(item['target_term'], item['source_term'], source_language),
        use_case="sentence",
        schema_name="sentence",
        max_tokens=200
    )

    sentence = parse_sentence_output(content)
    if sentence is None:
        log_error(logger, "Generated sentence unusable", vocabulary_id=item['id'], raw_output=content)
        raise GenerationError("Failed to generate a practice sentence. Please try again.")

    sentence['vocabulary_id'] = item['id']
    return sentence
