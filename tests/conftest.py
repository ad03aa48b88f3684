"""Shared fixtures for djangoql_completion tests."""

import asyncio
from typing import Any, Optional

import pytest

from djangoql_completion.core.schema import Schema


def _scalar(type_: str, **extra: Any) -> dict[str, Any]:
    return {"type": type_, "relation": None, **extra}


def _relation(target: str) -> dict[str, Any]:
    return {"type": "relation", "relation": target}


INTROSPECTIONS: dict[str, Any] = {
    "current_model": "core.book",
    "models": {
        "auth.group": {
            "user": _relation("auth.user"),
            "id": _scalar("int"),
            "name": _scalar("str"),
        },
        "auth.user": {
            "book": _relation("core.book"),
            "id": _scalar("int"),
            "password": _scalar("str"),
            "last_login": _scalar("datetime"),
            "is_superuser": _scalar("bool"),
            "username": _scalar("str"),
            "first_name": _scalar("str"),
            "last_name": _scalar("str"),
            "email": _scalar("str"),
            "is_staff": _scalar("bool"),
            "is_active": _scalar("bool"),
            "date_joined": _scalar("datetime"),
            "groups": _relation("auth.group"),
        },
        "core.book": {
            "id": _scalar("int"),
            "name": _scalar("str"),
            "author": _relation("auth.user"),
            "written": _scalar("datetime"),
            "is_published": _scalar("bool"),
            "rating": _scalar("float"),
            "price": _scalar("float"),
            "genre": _scalar("str", options=["Fantasy", "fiction", "History"]),
            "publisher": _scalar("str", options=True),
            "is_reprint": _scalar("bool", nullable=True),
            "isbn": _scalar("isbn"),
        },
    },
    "suggestions_api_url": "http://testserver/admin/core/book/suggestions/",
}


class StubJsonClient:
    """JSON client serving canned value pages."""

    def __init__(self, pages: Optional[dict[int, dict[str, Any]]] = None, delay: float = 0.0):
        self.pages = pages or {}
        self.delay = delay
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        params = dict(params or {})
        self.calls.append((url, params))
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.pages.get(params.get("page", 1), {"items": [], "page": params.get("page", 1), "has_next": False})


@pytest.fixture
def introspections() -> dict[str, Any]:
    return INTROSPECTIONS


@pytest.fixture
def schema() -> Schema:
    return Schema.model_validate(INTROSPECTIONS)


@pytest.fixture
def stub_client() -> StubJsonClient:
    return StubJsonClient(
        pages={
            1: {"items": ["Penguin", "Pan Books"], "page": 1, "has_next": True},
            2: {"items": ["Vintage"], "page": 2, "has_next": False},
        }
    )


@pytest.fixture
def client_factory():
    return StubJsonClient
