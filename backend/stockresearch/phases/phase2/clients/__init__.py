"""Search API clients: Google Custom Search and SearXNG."""

from .google import search_google
from .searxng import search_searxng

__all__ = ["search_google", "search_searxng"]
