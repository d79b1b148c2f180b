# src/taskdeck/remote/posts.py

from __future__ import annotations

import asyncio
import logging

from .api_client import ApiClient, CommentsAPI, PostsAPI, UsersAPI
from .models import EnrichedPost, PageResult, Post, PostDetail, User, paginate

logger = logging.getLogger(__name__)


def _check_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValueError(f"page must be >= 1 (got {page})")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1 (got {page_size})")


def enrich(posts: list[Post], users: list[User]) -> list[EnrichedPost]:
    """Attach each post's author (first user whose id == post.user_id, else None)."""
    by_id: dict[int, User] = {}
    for u in users:
        by_id.setdefault(u.id, u)
    return [
        EnrichedPost(id=p.id, user_id=p.user_id, title=p.title, body=p.body, user=by_id.get(p.user_id))
        for p in posts
    ]


class PostsAggregator:
    """
    Read-side composition over the remote posts/users resources.

    Owns no state: every result is a fresh snapshot for the (query, page) that produced it.
    Any transport failure fails the whole call with FetchError; there are no partial pages.
    """

    def __init__(self, client: ApiClient) -> None:
        if client is None:
            raise ValueError("client is required")
        self.posts = PostsAPI(client)
        self.users = UsersAPI(client)
        self.comments = CommentsAPI(client)

    async def fetch_page(self, page: int = 1, page_size: int = 10) -> PageResult[EnrichedPost]:
        """
        One page of posts joined with their authors.

        The remote resource does not report a total count, so the full post
        collection is requested once per call to derive it.
        """
        _check_paging(page, page_size)

        page_posts, users, all_posts = await asyncio.gather(
            self.posts.list_page(page, page_size),
            self.users.list_all(),
            self.posts.list_all(),
        )
        total = len(all_posts)
        logger.debug("fetch_page page=%s size=%s -> %s posts, total=%s", page, page_size, len(page_posts), total)

        return PageResult.build(enrich(page_posts, users), total=total, page=page, page_size=page_size)

    async def search(self, query: str, page: int = 1, page_size: int = 10) -> PageResult[Post]:
        """Client-side search: case-insensitive substring over title and body, paged locally."""
        _check_paging(page, page_size)

        all_posts = await self.posts.list_all()
        matches = [p for p in all_posts if p.matches(query)]
        logger.debug("search query=%r -> %s/%s matches", query, len(matches), len(all_posts))
        return paginate(matches, page, page_size)

    async def post_detail(self, post_id: int) -> PostDetail:
        post = await self.posts.get(post_id)
        users, comments = await asyncio.gather(
            self.users.list_all(),
            self.comments.by_post(post.id),
        )
        user = next((u for u in users if u.id == post.user_id), None)
        return PostDetail(post=post, user=user, comments=tuple(comments))
