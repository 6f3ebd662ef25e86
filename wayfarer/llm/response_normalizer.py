# llm/response_normalizer.py
"""
Response Normalizer
Turns whatever the text-generation provider sent back into a list of
travel-option dicts.

Providers do not reliably honour "return only JSON", so extraction runs
through an ordered chain of strategies and the first one that yields a
list wins:

1. DirectArrayStrategy   - the body already is a list
2. WrappedFieldStrategy  - the body holds a list under "results"/"predictions"
3. EmbeddedTextStrategy  - generated text contains a JSON array somewhere

If nothing matches, ProviderResponseError is raised. An empty list is only
returned when the provider itself produced one.
"""

import json
import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from ..errors import ProviderResponseError

WRAPPER_KEYS = ("results", "predictions")

# Greedy: first "[" to last "]"
ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)

LOG_PAYLOAD_LIMIT = 500


class ExtractionStrategy:
    """Base strategy; returns a list or None when it does not apply"""

    name = "base"

    def extract(self, body: Any) -> Optional[List[Any]]:
        raise NotImplementedError


class DirectArrayStrategy(ExtractionStrategy):
    name = "direct_array"

    def extract(self, body: Any) -> Optional[List[Any]]:
        if isinstance(body, list):
            return body
        return None


class WrappedFieldStrategy(ExtractionStrategy):
    name = "wrapped_field"

    def __init__(self, keys: Iterable[str] = WRAPPER_KEYS):
        self.keys = tuple(keys)

    def extract(self, body: Any) -> Optional[List[Any]]:
        if not isinstance(body, dict):
            return None
        for key in self.keys:
            value = body.get(key)
            if isinstance(value, list):
                return value
        return None


class EmbeddedTextStrategy(ExtractionStrategy):
    """
    Parse a JSON array out of the provider's generated text.

    Each text candidate is tried on its own in preference order, then all of
    them joined with newlines. For every text, a direct json.loads is tried
    first (accepting a list or an object wrapping one), then the greedy
    bracket match.
    """

    name = "embedded_text"

    def __init__(self, keys: Iterable[str] = WRAPPER_KEYS):
        self.keys = tuple(keys)

    def extract(self, body: Any) -> Optional[List[Any]]:
        texts = text_candidates(body)
        if not texts:
            return None

        attempts = list(texts)
        if len(texts) > 1:
            attempts.append("\n".join(texts))

        for text in attempts:
            parsed = self._parse_text(text)
            if parsed is not None:
                return parsed
        return None

    def _parse_text(self, text: str) -> Optional[List[Any]]:
        try:
            parsed = json.loads(text)
        except (TypeError, ValueError):
            parsed = None
        else:
            if isinstance(parsed, list):
                return parsed
            if isinstance(parsed, dict):
                for key in self.keys:
                    if isinstance(parsed.get(key), list):
                        return parsed[key]

        match = ARRAY_PATTERN.search(text)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            return None
        return parsed if isinstance(parsed, list) else None


DEFAULT_STRATEGIES = (
    DirectArrayStrategy(),
    WrappedFieldStrategy(),
    EmbeddedTextStrategy(),
)


# ============================================
# Text candidates
# ============================================

def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def text_candidates(body: Any) -> List[str]:
    """
    Collect generated-text fields in preference order.

    Known shapes:
        {"output_text": "..."} / {"output": "..."} / {"text": "..."}
        {"candidates": [{"output": "..."}]}
        {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}   (Gemini)
        {"choices": [{"message": {"content": "..."}}]}               (OpenAI-compatible)
        "raw string body"
    """
    if isinstance(body, str):
        return [body] if body.strip() else []
    if not isinstance(body, dict):
        return []

    texts: List[str] = []
    for key in ("output_text", "output", "text"):
        text = _as_text(body.get(key))
        if text:
            texts.append(text)

    candidates = body.get("candidates")
    if isinstance(candidates, list):
        outputs = [c.get("output") for c in candidates if isinstance(c, dict)]
        joined = "\n".join(o for o in outputs if _as_text(o))
        if joined:
            texts.append(joined)

        parts_text = []
        for candidate in candidates:
            if not isinstance(candidate, dict):
                continue
            content = candidate.get("content")
            parts = content.get("parts") if isinstance(content, dict) else None
            for part in parts or []:
                if isinstance(part, dict) and _as_text(part.get("text")):
                    parts_text.append(part["text"])
        if parts_text:
            texts.append("".join(parts_text))

    choices = body.get("choices")
    if isinstance(choices, list):
        for choice in choices:
            if not isinstance(choice, dict):
                continue
            message = choice.get("message")
            text = _as_text(message.get("content")) if isinstance(message, dict) else None
            text = text or _as_text(choice.get("text"))
            if text:
                texts.append(text)

    return texts


# ============================================
# Entry point
# ============================================

def normalize_response(body: Any, strategies: Iterable[ExtractionStrategy] = DEFAULT_STRATEGIES) -> List[Any]:
    """
    Extract the travel-option list from a provider response body.

    Args:
        body: Decoded JSON body, or raw text when the body was not JSON
        strategies: Extraction chain, tried in order

    Returns:
        List of options as the provider produced them (not validated)

    Raises:
        ProviderResponseError: No strategy found a list
    """
    for strategy in strategies:
        result = strategy.extract(body)
        if result is not None:
            logger.debug(f"Provider response normalized via {strategy.name} ({len(result)} items)")
            return result

    preview = body if isinstance(body, str) else json.dumps(body, default=str)
    logger.warning(f"Provider response not understood: {preview[:LOG_PAYLOAD_LIMIT]}")
    raise ProviderResponseError(detail=f"unrecognized response of type {type(body).__name__}")


def describe_shape(body: Any) -> Dict[str, Any]:
    """Short description of a response body for logs"""
    if isinstance(body, dict):
        return {"type": "object", "keys": sorted(body.keys())[:10]}
    if isinstance(body, list):
        return {"type": "array", "length": len(body)}
    return {"type": type(body).__name__}
