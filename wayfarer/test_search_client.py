"""pytest tests for the travel search client and prompt."""

import asyncio
import json

import httpx
import pytest

from wayfarer.config import Settings
from wayfarer.errors import (
    ProviderNotConfiguredError,
    ProviderResponseError,
    ProviderTimeoutError,
    UpstreamError,
)
from wayfarer.llm.prompts import build_search_prompt
from wayfarer.llm.search_client import TravelSearchClient


def make_settings(**overrides):
    config = Settings()
    config.GEMINI_API_URL = "https://llm.example.test/v1/generate"
    config.GEMINI_API_KEY = "secret-key"
    config.GEMINI_AUTH_MODE = "bearer"
    config.GEMINI_REQUEST_FORMAT = "generic"
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def run_search(config, handler, **kwargs):
    async def scenario():
        client = TravelSearchClient(config, transport=httpx.MockTransport(handler))
        try:
            return await client.search(kwargs.get("query", "beach week"),
                                       kwargs.get("budget", "affordable"),
                                       kwargs.get("max_results", 6))
        finally:
            await client.close()

    return asyncio.run(scenario())


def test_prompt_mentions_query_budget_and_keys():
    prompt = build_search_prompt('quiet "islands"', "luxury", 3)
    assert "up to 3 travel options" in prompt
    assert "Query: \"quiet 'islands'\"" in prompt
    assert "Budget: luxury" in prompt
    for key in ("title", "country", "price_estimate", "highlights", "booking_url"):
        assert f'"{key}"' in prompt


def test_generic_payload_with_bearer_auth():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"results": [{"title": "Madeira"}]})

    results = run_search(make_settings(), handler)
    assert results == [{"title": "Madeira"}]
    assert seen["auth"] == "Bearer secret-key"
    assert "beach week" in seen["body"]["prompt"]
    assert seen["body"]["max_output_tokens"] == 800


def test_gemini_payload_with_api_key_header():
    seen = {}

    def handler(request):
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": '[{"title": "Tromso"}]'}]}}]
        })

    config = make_settings(GEMINI_AUTH_MODE="api_key", GEMINI_REQUEST_FORMAT="gemini")
    assert run_search(config, handler) == [{"title": "Tromso"}]
    assert seen["key"] == "secret-key"
    assert seen["auth"] is None
    assert seen["body"]["contents"][0]["parts"][0]["text"].startswith("You are a travel assistant")


def test_query_param_auth():
    seen = {}

    def handler(request):
        seen["key"] = request.url.params.get("key")
        return httpx.Response(200, json=[{"title": "Bled"}])

    run_search(make_settings(GEMINI_AUTH_MODE="query"), handler)
    assert seen["key"] == "secret-key"


def test_results_trimmed_to_max_results():
    def handler(request):
        return httpx.Response(200, json=[{"title": str(n)} for n in range(10)])

    assert len(run_search(make_settings(), handler, max_results=3)) == 3


def test_plain_text_body_is_normalized():
    def handler(request):
        return httpx.Response(200, text='Options: [{"title": "Gozo"}]')

    assert run_search(make_settings(), handler) == [{"title": "Gozo"}]


def test_not_configured():
    with pytest.raises(ProviderNotConfiguredError):
        run_search(make_settings(GEMINI_API_URL=""), lambda request: httpx.Response(200, json=[]))


def test_timeout_becomes_gateway_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProviderTimeoutError):
        run_search(make_settings(), handler)


def test_connect_error_becomes_gateway_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError):
        run_search(make_settings(), handler)


def test_provider_error_status():
    def handler(request):
        return httpx.Response(500, json={"error": "overloaded"})

    with pytest.raises(UpstreamError) as info:
        run_search(make_settings(), handler)
    assert "500" in info.value.detail


def test_unrecognized_shape():
    def handler(request):
        return httpx.Response(200, json={"text": "I could not find anything."})

    with pytest.raises(ProviderResponseError):
        run_search(make_settings(), handler)
