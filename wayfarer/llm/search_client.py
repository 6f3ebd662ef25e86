# llm/search_client.py
"""
Travel Search Client
Sends the search instruction to the configured text-generation endpoint and
normalizes whatever comes back.

One provider call per request, no retries: transient provider failures are
surfaced to the caller as gateway errors.
"""

from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from ..config import Settings, settings as default_settings
from ..errors import (
    ProviderNotConfiguredError,
    ProviderTimeoutError,
    UpstreamError,
)
from .prompts import build_search_prompt
from .response_normalizer import describe_shape, normalize_response


class TravelSearchClient:
    """
    Async client for the generative search endpoint.

    Auth modes (GEMINI_AUTH_MODE):
        bearer  - Authorization: Bearer <key>
        api_key - x-goog-api-key: <key>
        query   - ?key=<key>

    Request formats (GEMINI_REQUEST_FORMAT):
        generic - {"prompt": ..., "max_output_tokens": ...}
        gemini  - {"contents": [{"parts": [{"text": ...}]}], "generationConfig": {...}}
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or default_settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.GEMINI_TIMEOUT),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ============================================
    # Request shaping
    # ============================================

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        if self.config.GEMINI_REQUEST_FORMAT == "gemini":
            return {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "maxOutputTokens": self.config.GEMINI_MAX_OUTPUT_TOKENS,
                    "responseMimeType": "application/json",
                },
            }
        return {
            "prompt": prompt,
            "max_output_tokens": self.config.GEMINI_MAX_OUTPUT_TOKENS,
        }

    def build_auth(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        """Return (headers, query params) for the configured auth mode"""
        headers = {"Content-Type": "application/json"}
        params: Dict[str, str] = {}
        key = self.config.GEMINI_API_KEY
        mode = self.config.GEMINI_AUTH_MODE

        if mode == "api_key":
            headers["x-goog-api-key"] = key
        elif mode == "query":
            params["key"] = key
        else:
            headers["Authorization"] = f"Bearer {key}"
        return headers, params

    # ============================================
    # Search
    # ============================================

    async def fetch_raw(self, prompt: str) -> Any:
        """
        POST the prompt and return the decoded body.

        A body that is not JSON is returned as text so the normalizer can
        still look for an embedded array.
        """
        if not self.config.search_configured:
            raise ProviderNotConfiguredError(
                detail="GEMINI_API_URL and GEMINI_API_KEY must be set on the server environment"
            )

        headers, params = self.build_auth()
        try:
            response = await self.client.post(
                self.config.GEMINI_API_URL,
                json=self.build_payload(prompt),
                headers=headers,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Search provider timed out after {self.config.GEMINI_TIMEOUT}s: {e!r}")
            raise ProviderTimeoutError(detail=str(e) or "timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"Search provider unreachable: {e!r}")
            raise UpstreamError(detail=str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            logger.error(
                f"Search provider returned {response.status_code}: {response.text[:500]}"
            )
            raise UpstreamError(detail=f"provider returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError:
            return response.text

    async def search(self, query: str, budget: str = "affordable", max_results: int = 6) -> List[Any]:
        """
        Run one travel search.

        Args:
            query: Traveller's free-text query
            budget: Budget hint
            max_results: Upper bound on returned options

        Returns:
            List of travel-option dicts, at most max_results long

        Raises:
            UpstreamError: Provider unreachable, failing, timing out or unparseable
        """
        prompt = build_search_prompt(query, budget, max_results)
        body = await self.fetch_raw(prompt)
        logger.debug(f"Search provider response shape: {describe_shape(body)}")

        results = normalize_response(body)
        logger.info(f"Search '{query[:60]}' ({budget}) -> {len(results)} results")
        return results[:max_results]
