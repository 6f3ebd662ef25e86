# wayfarer/__init__.py
"""
Wayfarer Service Package

A small travel backend with:
- Travel search proxied to a generative text endpoint
- A comment collection kept in a local JSON file or a GitHub-hosted JSON file
"""

__version__ = "1.0.0"

# Package structure:
# wayfarer/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings
# ├── errors.py             <- Error taxonomy and HTTP statuses
# │
# ├── api/                  <- FastAPI Routers
# │   ├── search.py         <- POST /search
# │   ├── comments.py       <- /comments
# │   └── health.py         <- GET /health
# │
# ├── llm/                  <- Search proxy
# │   ├── prompts.py        <- Prompt templates
# │   ├── search_client.py  <- Provider call
# │   └── response_normalizer.py <- Provider output -> option list
# │
# ├── comments/             <- Comment rules
# │   ├── validation.py     <- Bounds, sanitizing, ids
# │   └── service.py        <- Create/list/delete
# │
# ├── store/                <- Comment persistence
# │   ├── base.py           <- Optimistic-concurrency write loop
# │   ├── local_store.py    <- Local JSON file
# │   ├── github_store.py   <- GitHub contents API
# │   └── factory.py        <- Backend selection
# │
# └── schemas/              <- Pydantic Models
#     └── api_schemas.py
