# api/search.py
"""
Search API Endpoint
Proxies travel searches to the text-generation provider
"""

from fastapi import APIRouter, Request

from ..schemas.api_schemas import ErrorResponse, SearchRequest, SearchResponse

router = APIRouter(tags=["search"])


@router.post("/search", response_model=SearchResponse, responses={502: {"model": ErrorResponse}})
async def search(payload: SearchRequest, request: Request):
    """
    Ask the provider for travel options.

    Example:
        POST /search
        {"query": "long weekend near the sea", "budget": "moderate", "max_results": 4}
    """
    client = request.app.state.search_client
    results = await client.search(payload.query, payload.budget.value, payload.max_results)
    return SearchResponse(results=results)


# Legacy path kept for older front-end builds
router.add_api_route(
    "/gemini-search",
    search,
    methods=["POST"],
    response_model=SearchResponse,
    include_in_schema=False,
)
