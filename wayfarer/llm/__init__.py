# llm/__init__.py
"""
LLM Components Package

Contains the search proxy pieces:
- prompts: Instruction templates for the travel search
- search_client: Calls the text-generation endpoint
- response_normalizer: Extracts the option list from provider output
"""

from .prompts import build_search_prompt
from .response_normalizer import normalize_response, text_candidates
from .search_client import TravelSearchClient

__all__ = [
    "build_search_prompt",
    "normalize_response",
    "text_candidates",
    "TravelSearchClient",
]
