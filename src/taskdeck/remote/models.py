# src/taskdeck/remote/models.py

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def _int(data: dict[str, Any], key: str) -> int:
    return int(data[key])


@dataclass(slots=True, frozen=True)
class User:
    id: int
    name: str
    email: str
    username: str = ""
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> User:
        known = {"id", "name", "email", "username"}
        return cls(
            id=_int(data, "id"),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            username=str(data.get("username") or ""),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(slots=True, frozen=True)
class Post:
    id: int
    user_id: int
    title: str
    body: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Post:
        return cls(
            id=_int(data, "id"),
            user_id=_int(data, "userId"),
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
        )

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "userId": self.user_id, "title": self.title, "body": self.body}

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against title and body."""
        q = query.casefold()
        return q in self.title.casefold() or q in self.body.casefold()


@dataclass(slots=True, frozen=True)
class EnrichedPost(Post):
    """Post joined with its author; user is None when no user has the post's userId."""

    user: User | None = None


@dataclass(slots=True, frozen=True)
class Comment:
    id: int
    post_id: int
    name: str
    email: str
    body: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Comment:
        return cls(
            id=_int(data, "id"),
            post_id=_int(data, "postId"),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            body=str(data.get("body") or ""),
        )


@dataclass(slots=True, frozen=True)
class PostDetail:
    post: Post
    user: User | None
    comments: tuple[Comment, ...]


@dataclass(slots=True, frozen=True)
class PageResult(Generic[T]):
    data: tuple[T, ...]
    total: int
    page: int
    total_pages: int

    @classmethod
    def build(cls, data: Sequence[T], *, total: int, page: int, page_size: int) -> PageResult[T]:
        return cls(
            data=tuple(data),
            total=total,
            page=page,
            total_pages=math.ceil(total / page_size),
        )


def paginate(items: Sequence[T], page: int, page_size: int) -> PageResult[T]:
    """Slice one page out of a full sequence: [(page-1)*page_size, page*page_size)."""
    start = (page - 1) * page_size
    end = start + page_size
    return PageResult.build(items[start:end], total=len(items), page=page, page_size=page_size)
