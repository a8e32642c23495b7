"""Bing Web Search client."""

from dataclasses import dataclass

import httpx

from artbot.domain.knowledge import SearchResult
from artbot.errors import SearchError
from artbot.services.knowledge import WebSearchClient


@dataclass
class HttpxBingSearchClient(WebSearchClient):
    """Web search client implemented with httpx."""

    subscription_key: str
    endpoint: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, subscription_key: str, endpoint: str, timeout: float = 15.0
    ) -> "HttpxBingSearchClient":
        """Create a search client with a managed httpx session."""
        return cls(
            subscription_key=subscription_key,
            endpoint=endpoint,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def search(self, query: str, count: int = 3) -> list[SearchResult]:
        """Return web page results for query."""
        try:
            response = await self.http_client.get(
                self.endpoint,
                params={"q": query, "count": count},
                headers={"Ocp-Apim-Subscription-Key": self.subscription_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SearchError(f"Search request failed: {exc}") from exc
        if not isinstance(payload, dict):
            raise SearchError("Unexpected search response")

        web_pages = payload.get("webPages") or {}
        if not isinstance(web_pages, dict):
            raise SearchError("Search webPages is not an object")
        pages = web_pages.get("value") or []
        if not isinstance(pages, list):
            raise SearchError("Search results are not a list")
        return [
            SearchResult(name=str(page["name"]), url=str(page["url"]))
            for page in pages
            if isinstance(page, dict) and page.get("name") and page.get("url")
        ]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
