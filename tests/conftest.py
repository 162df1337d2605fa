"""
Shared fixtures: in-memory entity stores that record every fetch.
"""

from __future__ import annotations

from typing import Any

import pytest


PETER = {"id": "peter"}
GERNOT = {"id": "gernot"}
ROBIN = {"id": "robin"}

COMMENT_A = {"id": "a"}
COMMENT_B = {"id": "b"}

MESSAGE_X = {
    "id": "x",
    "author": "peter",
    "recipient": "gernot",
    "visibleTo": ["robin"],
    "nestedData": {"comments": ["a", "b"]},
}
MESSAGE_Y = {
    "id": "y",
    "author": "gernot",
    "recipient": "peter",
    "visibleTo": [],
    "nestedData": {"comments": []},
}

MESSAGE_SCHEMA = {
    "author": "user",
    "recipient": "user",
    "visibleTo": ["user"],
    "nestedData": {"comments": ["comment"]},
}


class EntityStore:
    """In-memory entity source recording calls as (fn, args) tuples."""

    def __init__(self, entities: list[dict[str, Any]]):
        self.entities = {e["id"]: e for e in entities}
        self.calls: list[tuple] = []

    async def get_one(self, id: Any) -> dict[str, Any] | None:
        self.calls.append(("get_one", id))
        return self.entities.get(id)

    async def get_some(self, ids: list[Any]) -> list[dict[str, Any]]:
        self.calls.append(("get_some", list(ids)))
        return [self.entities[i] for i in ids if i in self.entities]

    async def get_all(self) -> list[dict[str, Any]]:
        self.calls.append(("get_all",))
        return list(self.entities.values())

    def calls_to(self, fn_name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == fn_name]


@pytest.fixture
def users() -> EntityStore:
    return EntityStore([PETER, GERNOT, ROBIN])


@pytest.fixture
def comments() -> EntityStore:
    return EntityStore([COMMENT_A, COMMENT_B])


@pytest.fixture
def messages() -> EntityStore:
    return EntityStore([MESSAGE_X, MESSAGE_Y])


@pytest.fixture
def entity_configs(users, comments, messages) -> dict[str, dict[str, Any]]:
    return {
        "user": {
            "api": {"get_user": users.get_one, "get_users": users.get_all},
            "plugins": {
                "denormalizer": {
                    "getOne": "get_user",
                    "getAll": "get_users",
                    "threshold": 5,
                },
            },
        },
        "message": {
            "api": {"get_message": messages.get_one, "get_messages": messages.get_all},
            "plugins": {"denormalizer": {"schema": MESSAGE_SCHEMA}},
        },
        "comment": {
            "api": {"get_comment": comments.get_one, "get_comments": comments.get_all},
            "plugins": {
                "denormalizer": {
                    "get_one": "get_comment",
                    "get_all": "get_comments",
                },
            },
        },
    }
