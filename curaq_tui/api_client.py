"""Async client for the CuraQ REST API."""

import logging

import httpx

from . import config
from .models import Article, ArticleList, DiscoveryItem


class ApiError(Exception):
    """A CuraQ request failed, either on the network or with a non-2xx status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class CuraQClient:
    """
    Thin wrapper over the CuraQ v1 endpoints.

    Every request is sent with the bearer token. The underlying
    httpx.AsyncClient is created lazily and closed with aclose().
    """

    def __init__(self, token, base_url=config.BASE_URL, transport=None, timeout=config.REQUEST_TIMEOUT):
        self.token = token
        self.base_url = base_url
        self._transport = transport
        self._timeout = timeout
        self._http = None

    def _client(self):
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http

    async def aclose(self):
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _request(self, method, path, **kwargs):
        try:
            response = await self._client().request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logging.warning(f"{method} {path} failed: {e}")
            raise ApiError(f"API Error: {e}") from e

        if not response.is_success:
            logging.warning(f"{method} {path} returned {response.status_code}")
            raise ApiError(
                f"API Error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"API Error: invalid JSON from {path}", status_code=response.status_code) from e

    async def get_articles(self, page=1, page_size=config.ARTICLES_PAGE_SIZE) -> ArticleList:
        data = await self._request("GET", "/api/v1/articles", params={"page": page, "pageSize": page_size})
        return ArticleList.from_dict(data or {})

    async def get_article(self, article_id) -> Article:
        data = await self._request("GET", f"/api/v1/articles/{article_id}")
        return Article.from_dict(data or {})

    async def search_articles(self, query) -> list[Article]:
        data = await self._request("GET", "/api/v1/articles/search", params={"q": query})
        return _article_results(data)

    async def semantic_search(self, query) -> list[Article]:
        data = await self._request("GET", "/api/v1/articles/semantic-search", params={"q": query})
        return _article_results(data)

    async def mark_as_read(self, article_id):
        await self._request("POST", f"/api/v1/articles/{article_id}/read")

    async def delete_article(self, article_id):
        await self._request("DELETE", f"/api/v1/articles/{article_id}")

    async def get_discovery(self) -> list[DiscoveryItem]:
        data = await self._request("GET", "/api/v1/discovery") or {}
        items = data.get("items") or data.get("discoveries") or []
        return [DiscoveryItem.from_dict(item) for item in items]

    async def dismiss_discovery(self, item_id):
        await self._request("POST", f"/api/v1/discovery/{item_id}/dismiss")

    async def create_article(self, url) -> Article:
        data = await self._request("POST", "/api/v1/articles", json={"url": url}) or {}
        return Article.from_dict(data.get("article") or {})


def _article_results(data):
    # Search endpoints answer with either "articles" or "data"
    data = data or {}
    items = data.get("articles") or data.get("data") or []
    return [Article.from_dict(item) for item in items]
