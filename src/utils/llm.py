"""
LLM calls for sentence generation.

Talks to OpenAI directly for bare model names and to OpenRouter (which speaks
the OpenAI API) for vendor-prefixed names. Each use case has an ordered
fallback chain of models in config.FALLBACK_CHAINS.
"""

import json
import logging
import os
import time
import openai
from typing import Dict, List, Any, Optional
from middleware.metrics import (
    llm_calls_total,
    llm_request_duration_seconds,
    llm_tokens_total,
    llm_errors_total,
)
from config.config import FALLBACK_CHAINS

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Models that support strict JSON Schema validation
MODELS_WITH_JSON_SCHEMA_SUPPORT = {
    "gpt-4o",
    "gpt-4o-mini",
    "openai/gpt-4o-mini",
    "google/gemini-2.0-flash-lite-001",
}


def normalize_model_name(model_name: str) -> str:
    """
    Model name as a Prometheus label value.

    Examples:
        "deepseek/deepseek-chat-v3.1" -> "deepseek_deepseek_chat_v3_1"
        "gpt-4o-mini" -> "gpt_4o_mini"
    """
    return model_name.replace("/", "_").replace("-", "_").replace(".", "_")


def get_provider_for_model(model_name: str) -> str:
    """Models with a vendor prefix go through OpenRouter, bare names to OpenAI."""
    return "openrouter" if "/" in model_name else "openai"


def get_fallback_chain(use_case: str) -> List[str]:
    """Models to try in order for a use case; unknown use cases get the 'general' chain."""
    if use_case in FALLBACK_CHAINS:
        return FALLBACK_CHAINS[use_case]
    return FALLBACK_CHAINS.get('general', [])


def get_response_format(model_name: str, schema_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Strict json_schema for models that support it, json_object otherwise.
    """
    if schema_name is None:
        return None

    from config.json_schemas import get_schema

    if model_name in MODELS_WITH_JSON_SCHEMA_SUPPORT:
        return {"type": "json_schema", "json_schema": get_schema(schema_name)}
    return {"type": "json_object"}


def _client_for(provider: str) -> openai.OpenAI:
    if provider == "openrouter":
        return openai.OpenAI(api_key=os.getenv("OPEN_ROUTER_KEY"), base_url=OPENROUTER_BASE_URL)
    return openai.OpenAI()


def llm_completion(
    messages: List[Dict[str, str]],
    model_name: str,
    use_case: str = "general",
    response_format: Optional[Dict[str, Any]] = None,
    temperature: float = 1.0,
    max_tokens: Optional[int] = None
) -> Optional[str]:
    """
    Make one LLM completion API call.

    Returns:
        Response content as string, or None if the call fails, comes back
        empty, or (in JSON mode) is not a JSON object
    """
    start_time = time.time()
    provider = get_provider_for_model(model_name)
    normalized_model = normalize_model_name(model_name)
    labels = {'provider': provider, 'model': normalized_model, 'use_case': use_case}

    def _fail(error_type: str) -> None:
        llm_calls_total.labels(status='error', **labels).inc()
        llm_errors_total.labels(error_type=error_type, **labels).inc()
        llm_request_duration_seconds.labels(**labels).observe(time.time() - start_time)

    params = {
        "model": model_name,
        "messages": messages,
        "temperature": temperature
    }
    if response_format is not None:
        params["response_format"] = response_format
    if max_tokens is not None:
        params["max_tokens"] = max_tokens

    try:
        response = _client_for(provider).chat.completions.create(**params)
    except openai.OpenAIError as e:
        logger.error(f"LLM API error (provider={provider}, model={model_name}): {e}", exc_info=True)
        _fail(type(e).__name__)
        return None

    content = response.choices[0].message.content
    duration = time.time() - start_time
    logger.info(f"LLM response received: provider={provider}, model={model_name}, use_case={use_case}, content_length={len(content) if content else 0}, duration={duration:.2f}s")

    if not content:
        logger.error(f"{provider} returned empty content. Model: {model_name}")
        _fail('empty_response')
        return None

    # JSON must be valid as returned; anything else moves on to the next model
    if response_format and response_format.get("type") in ["json_object", "json_schema"]:
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"JSON parsing failed for {model_name}: {e.msg}. Raw LLM output:\n{content}")
            _fail('json_parse_failed')
            return None
        if not isinstance(parsed, dict):
            logger.error(f"JSON type validation failed for {model_name}: expected dict, got {type(parsed).__name__}")
            _fail('json_wrong_type')
            return None

    llm_calls_total.labels(status='success', **labels).inc()
    llm_request_duration_seconds.labels(**labels).observe(duration)

    usage = getattr(response, 'usage', None)
    if usage:
        if getattr(usage, 'prompt_tokens', 0):
            llm_tokens_total.labels(type='prompt', **labels).inc(usage.prompt_tokens)
        if getattr(usage, 'completion_tokens', 0):
            llm_tokens_total.labels(type='completion', **labels).inc(usage.completion_tokens)

    return content.strip()


def llm_completion_with_fallback(
    messages: List[Dict[str, str]],
    use_case: str,
    schema_name: str,
    temperature: float = 1.0,
    max_tokens: Optional[int] = None
) -> Optional[str]:
    """
    Make an LLM completion call, walking FALLBACK_CHAINS[use_case] until one
    model returns usable content.

    Returns:
        Response content as string, or None if every model in the chain fails
    """
    chain = get_fallback_chain(use_case)

    if not chain:
        logger.error(f"No models configured for use_case={use_case}")
        return None

    for attempt, model_name in enumerate(chain, start=1):
        logger.info(f"use_case={use_case}: trying {model_name} ({attempt}/{len(chain)})")

        result = llm_completion(
            messages=messages,
            model_name=model_name,
            use_case=use_case,
            response_format=get_response_format(model_name, schema_name),
            temperature=temperature,
            max_tokens=max_tokens
        )

        if result:
            if attempt > 1:
                logger.warning(f"use_case={use_case}: served by fallback model {model_name} (attempt {attempt})")
            return result

        logger.warning(f"use_case={use_case}: {model_name} returned nothing usable")

    logger.error(f"Every model failed for use_case={use_case}: {', '.join(chain)}")
    return None
