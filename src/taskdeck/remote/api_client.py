# src/taskdeck/remote/api_client.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from ..errors import FetchError
from .models import Comment, Post, User

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"

M = TypeVar("M")


class ApiClient:
    """
    Stateless JSON request function over httpx.

    A fresh AsyncClient is opened per request, so one ApiClient can be shared
    across event loops (console session, tests).

    Failure policy:
    - non-2xx -> FetchError(status=<code>)
    - connection/timeout errors or undecodable JSON -> FetchError(status=None)
    - items missing required ids -> FetchError(status=None) from the typed APIs below
    No retries: the caller decides (every read here is idempotent).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url is required")
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "base_url": self._base_url,
            "headers": {"Content-Type": "application/json"},
        }
        # Leave httpx defaults alone unless a timeout is configured.
        if self._timeout_seconds is not None:
            kwargs["timeout"] = httpx.Timeout(self._timeout_seconds)
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.request(method, endpoint, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error("API request failed: %s %s (%s)", method, endpoint, e.__class__.__name__)
            raise FetchError(endpoint, None, f"Request to {endpoint} failed: {e}") from e

        if not response.is_success:
            logger.error("API request failed: %s %s status=%s", method, endpoint, response.status_code)
            raise FetchError(endpoint, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error("API response is not JSON: %s %s", method, endpoint)
            raise FetchError(endpoint, response.status_code, f"Invalid JSON from {endpoint}") from e


def _expect_list(payload: Any, endpoint: str) -> list[dict[str, Any]]:
    if not isinstance(payload, list):
        raise FetchError(endpoint, None, f"Expected a JSON array from {endpoint}")
    return [item for item in payload if isinstance(item, dict)]


def _expect_object(payload: Any, endpoint: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise FetchError(endpoint, None, f"Expected a JSON object from {endpoint}")
    return payload


def _decode(factory: Callable[[dict[str, Any]], M], item: dict[str, Any], endpoint: str) -> M:
    try:
        return factory(item)
    except (KeyError, TypeError, ValueError) as e:
        logger.error("Invalid item from %s: %r", endpoint, item)
        raise FetchError(endpoint, None, f"Invalid item from {endpoint}") from e


class PostsAPI:
    def __init__(self, client: ApiClient) -> None:
        if client is None:
            raise ValueError("client is required")
        self._client = client

    async def list_page(self, page: int = 1, limit: int = 10) -> list[Post]:
        payload = await self._client.request("/posts", params={"_page": page, "_limit": limit})
        return [_decode(Post.from_json, p, "/posts") for p in _expect_list(payload, "/posts")]

    async def list_all(self) -> list[Post]:
        payload = await self._client.request("/posts")
        return [_decode(Post.from_json, p, "/posts") for p in _expect_list(payload, "/posts")]

    async def get(self, post_id: int) -> Post:
        endpoint = f"/posts/{int(post_id)}"
        payload = await self._client.request(endpoint)
        return _decode(Post.from_json, _expect_object(payload, endpoint), endpoint)

    async def by_user(self, user_id: int) -> list[Post]:
        payload = await self._client.request("/posts", params={"userId": int(user_id)})
        return [_decode(Post.from_json, p, "/posts") for p in _expect_list(payload, "/posts")]

    async def create(self, *, user_id: int, title: str, body: str) -> Post:
        payload = await self._client.request(
            "/posts",
            method="POST",
            json={"userId": int(user_id), "title": title, "body": body},
        )
        return _decode(Post.from_json, _expect_object(payload, "/posts"), "/posts")

    async def update(self, post: Post) -> Post:
        endpoint = f"/posts/{post.id}"
        payload = await self._client.request(endpoint, method="PUT", json=post.to_json())
        return _decode(Post.from_json, _expect_object(payload, endpoint), endpoint)

    async def delete(self, post_id: int) -> None:
        await self._client.request(f"/posts/{int(post_id)}", method="DELETE")


class UsersAPI:
    def __init__(self, client: ApiClient) -> None:
        if client is None:
            raise ValueError("client is required")
        self._client = client

    async def list_all(self) -> list[User]:
        payload = await self._client.request("/users")
        return [_decode(User.from_json, u, "/users") for u in _expect_list(payload, "/users")]

    async def get(self, user_id: int) -> User:
        endpoint = f"/users/{int(user_id)}"
        payload = await self._client.request(endpoint)
        return _decode(User.from_json, _expect_object(payload, endpoint), endpoint)


class CommentsAPI:
    def __init__(self, client: ApiClient) -> None:
        if client is None:
            raise ValueError("client is required")
        self._client = client

    async def by_post(self, post_id: int) -> list[Comment]:
        payload = await self._client.request("/comments", params={"postId": int(post_id)})
        return [_decode(Comment.from_json, c, "/comments") for c in _expect_list(payload, "/comments")]
