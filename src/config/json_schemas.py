"""
Structured-output schemas for LLM calls.

Models listed in utils.llm.MODELS_WITH_JSON_SCHEMA_SUPPORT receive the schema
as a strict json_schema response format; every other model gets json_object
mode and its answer is checked by the caller.
"""

# A fill-in-the-blank exercise: Amharic sentence with the word blanked out,
# the full sentence in the learner's language, and the word for the blank.
SENTENCE_SCHEMA = {
    "name": "fill_blank_sentence",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "source": {"type": "string", "description": "The full sentence in the learner's source language"},
            "target": {"type": "string", "description": "The Amharic sentence with the vocabulary word replaced by ____"},
            "blank": {"type": "string", "description": "The source-language word that fills the blank"},
        },
        "required": ["source", "target", "blank"],
        "additionalProperties": False,
    },
}

SCHEMA_REGISTRY = {
    "sentence": SENTENCE_SCHEMA,
}


def get_schema(name: str) -> dict:
    """Raises KeyError naming the known schemas when `name` is not registered."""
    try:
        return SCHEMA_REGISTRY[name]
    except KeyError:
        raise KeyError(f"No JSON schema named '{name}' (known: {', '.join(SCHEMA_REGISTRY)})") from None
