"""
Langchain Prompt Templates
Defines the travel search instruction sent to the text-generation provider
"""

from langchain_core.prompts import PromptTemplate

from ..schemas.api_schemas import TravelOption

# ============================================
# Travel Search Prompt
# ============================================

SEARCH_SYSTEM_PROMPT = PromptTemplate(
    input_variables=["max_results", "fields"],
    template="""You are a travel assistant. Given a user's query and budget, return a JSON array (only JSON) with up to {max_results} travel options.
Each item must be an object with keys:
{fields}
Return only valid JSON (no surrounding text)."""
)

SEARCH_USER_PROMPT = PromptTemplate(
    input_variables=["query", "budget", "max_results"],
    template="""Query: "{query}"
Budget: {budget}
Max results: {max_results}
Return the array now."""
)

# Key descriptions, in the order of TravelOption's fields
FIELD_HINTS = {
    "title": "string",
    "country": "string",
    "price_estimate": "number",
    "duration": "string",
    "highlights": "array of strings",
    "booking_url": "string",
    "info_url": "string, optional",
    "description": "string, optional",
}


def describe_fields() -> str:
    """Render the TravelOption keys as the prompt's key list"""
    return ", ".join(
        f'"{name}" ({FIELD_HINTS.get(name, "string")})'
        for name in TravelOption.model_fields
    )


def build_search_prompt(query: str, budget: str, max_results: int) -> str:
    """
    Build the full instruction for one search.

    Args:
        query: Traveller's free-text query
        budget: Budget hint value ("affordable", "moderate", "luxury")
        max_results: Upper bound on options requested

    Returns:
        str: System and user prompt joined by a blank line
    """
    system = SEARCH_SYSTEM_PROMPT.format(max_results=max_results, fields=describe_fields())
    user = SEARCH_USER_PROMPT.format(
        query=query.replace('"', "'"),
        budget=budget,
        max_results=max_results,
    )
    return f"{system}\n\n{user}"
