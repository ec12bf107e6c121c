#!/usr/bin/env python3

import unittest
import sys
import os
import json
from unittest.mock import patch, MagicMock

# Set environment variable before any imports
os.environ.setdefault('OPENAI_API_KEY', 'test-key-for-unit-tests')

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import openai

from config.languages import SourceLanguage
from services.errors import GenerationError
from services.sentence_service import (
    BLANK_PLACEHOLDER,
    build_sentence_prompt,
    parse_sentence_output,
    generate_sentence,
)
from utils import llm


WATER_ITEM = {'id': 7, 'target_term': 'ውሃ', 'source_term': 'Wasser', 'lesson': 'food'}

GOOD_SENTENCE = {
    "source": "Ich trinke Wasser.",
    "target": f"እኔ {BLANK_PLACEHOLDER} እጠጣለሁ።",
    "blank": "Wasser",
}


class TestParseSentenceOutput(unittest.TestCase):

    def test_valid_output(self):
        self.assertEqual(parse_sentence_output(json.dumps(GOOD_SENTENCE)), GOOD_SENTENCE)

    def test_strips_whitespace(self):
        padded = {key: f"  {value} " for key, value in GOOD_SENTENCE.items()}
        self.assertEqual(parse_sentence_output(json.dumps(padded)), GOOD_SENTENCE)

    def test_rejects_unusable_output(self):
        missing_blank = dict(GOOD_SENTENCE, target="እኔ ውሃ እጠጣለሁ።")
        empty_field = dict(GOOD_SENTENCE, source="  ")
        for content in [None, "", "not json", "[1, 2]", json.dumps({"source": "x"}),
                        json.dumps(missing_blank), json.dumps(empty_field)]:
            self.assertIsNone(parse_sentence_output(content), content)


class TestGenerateSentence(unittest.TestCase):

    def test_prompt_names_language_and_word(self):
        messages = build_sentence_prompt('ውሃ', 'Wasser', SourceLanguage.GERMAN)
        self.assertEqual(messages[0]['role'], 'system')
        self.assertIn('German', messages[1]['content'])
        self.assertIn('ውሃ', messages[1]['content'])
        self.assertIn(BLANK_PLACEHOLDER, messages[1]['content'])

    @patch('services.sentence_service.llm_completion_with_fallback')
    @patch('services.sentence_service.get_random_item')
    def test_generate_success(self, mock_item, mock_llm):
        mock_item.return_value = WATER_ITEM
        mock_llm.return_value = json.dumps(GOOD_SENTENCE)

        sentence = generate_sentence(SourceLanguage.GERMAN)

        self.assertEqual(sentence['vocabulary_id'], 7)
        self.assertEqual(sentence['blank'], 'Wasser')
        self.assertEqual(mock_llm.call_args[1]['use_case'], 'sentence')
        self.assertEqual(mock_llm.call_args[1]['schema_name'], 'sentence')

    @patch('services.sentence_service.llm_completion_with_fallback')
    @patch('services.sentence_service.get_random_item')
    def test_generate_with_empty_catalog(self, mock_item, mock_llm):
        mock_item.return_value = None

        with self.assertRaises(GenerationError):
            generate_sentence(SourceLanguage.SPANISH)

        mock_llm.assert_not_called()

    @patch('services.sentence_service.llm_completion_with_fallback')
    @patch('services.sentence_service.get_random_item')
    def test_generate_when_all_models_fail(self, mock_item, mock_llm):
        mock_item.return_value = WATER_ITEM
        mock_llm.return_value = None

        with self.assertRaises(GenerationError) as ctx:
            generate_sentence(SourceLanguage.GERMAN)

        self.assertEqual(ctx.exception.status_code, 502)


def _completion(content):
    response = MagicMock()
    response.choices[0].message.content = content
    response.usage = None
    return response


class TestLLMFallback(unittest.TestCase):

    def test_provider_routing(self):
        self.assertEqual(llm.get_provider_for_model("openai/gpt-4o-mini"), "openrouter")
        self.assertEqual(llm.get_provider_for_model("gpt-4o-mini"), "openai")

    def test_unknown_use_case_uses_general_chain(self):
        self.assertEqual(llm.get_fallback_chain("nonexistent"), llm.get_fallback_chain("general"))

    def test_response_format(self):
        self.assertIsNone(llm.get_response_format("gpt-4o-mini"))
        self.assertEqual(llm.get_response_format("gpt-4o-mini", "sentence")["type"], "json_schema")
        self.assertEqual(llm.get_response_format("deepseek/deepseek-chat-v3.1", "sentence"), {"type": "json_object"})

    @patch('utils.llm._client_for')
    def test_falls_back_after_api_error_and_bad_json(self, mock_client_for):
        client = MagicMock()
        client.chat.completions.create.side_effect = [
            openai.OpenAIError("rate limited"),
            _completion("this is not json"),
            _completion(json.dumps(GOOD_SENTENCE)),
        ]
        mock_client_for.return_value = client

        result = llm.llm_completion_with_fallback(
            messages=[{"role": "user", "content": "hi"}],
            use_case="sentence",
            schema_name="sentence"
        )

        self.assertEqual(json.loads(result), GOOD_SENTENCE)
        self.assertEqual(client.chat.completions.create.call_count, 3)

    @patch('utils.llm._client_for')
    def test_returns_none_when_chain_exhausted(self, mock_client_for):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("")
        mock_client_for.return_value = client

        result = llm.llm_completion_with_fallback(
            messages=[{"role": "user", "content": "hi"}],
            use_case="general",
            schema_name="sentence"
        )

        self.assertIsNone(result)
        self.assertEqual(client.chat.completions.create.call_count, len(llm.get_fallback_chain("general")))


if __name__ == '__main__':
    unittest.main()
