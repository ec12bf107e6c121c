from flask import jsonify, request
import logging

from services.session_service import validate_source_language
from services.sentence_service import generate_sentence
from services.vocabulary_service import list_vocabulary, list_sentences, list_lessons

logger = logging.getLogger(__name__)


def get_vocabulary():
    """
    GET /api/vocabulary?lesson=greetings

    Full catalog plus the seeded fill-in-the-blank sentences.
    """
    vocabulary = list_vocabulary(lesson=request.args.get('lesson'))
    sentences = list_sentences()

    return jsonify({
        "vocabulary": [
            {
                "id": item['id'],
                "amharic": item['amharic_word'],
                "german": item['german_word'],
                "english": item['english_word'],
                "french": item['french_word'],
                "spanish": item['spanish_word'],
                "lesson": item['lesson']
            }
            for item in vocabulary
        ],
        "sentences": sentences
    }), 200


def get_lessons():
    """GET /api/lessons"""
    return jsonify({"lessons": list_lessons()}), 200


def get_generated_sentence():
    """
    GET /api/sentences/generate?source_language=de

    Response:
        {"source": "Ich trinke Wasser.", "target": "እኔ ____ እጠጣለሁ።",
         "blank": "Wasser", "vocabulary_id": 7}
    """
    language = validate_source_language(request.args.get('source_language', 'de'))
    return jsonify(generate_sentence(language)), 200
