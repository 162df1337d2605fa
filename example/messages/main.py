"""
Messages example - minimal configuration.

Usage:
    python example/messages/main.py
"""

import asyncio
import logging

from denormalizer import build_api

USERS = {"peter": {"id": "peter"}, "gernot": {"id": "gernot"}, "robin": {"id": "robin"}}
COMMENTS = {"a": {"id": "a", "author": "robin"}, "b": {"id": "b", "author": "peter"}}
MESSAGES = {
    "x": {
        "id": "x",
        "author": "peter",
        "recipient": "gernot",
        "visibleTo": ["robin"],
        "nestedData": {"comments": ["a", "b"]},
    },
}


async def get_user(id):
    return USERS.get(id)


async def get_users():
    return list(USERS.values())


async def get_comment(id):
    return COMMENTS.get(id)


async def get_message(id):
    return MESSAGES.get(id)


api = build_api(
    {
        "user": {
            "api": {"get_user": get_user, "get_users": get_users},
            "plugins": {"denormalizer": {"get_one": "get_user", "get_all": "get_users", "threshold": 5}},
        },
        "comment": {
            "api": {"get_comment": get_comment},
            "plugins": {"denormalizer": {"get_one": "get_comment", "schema": {"author": "user"}}},
        },
        "message": {
            "api": {"get_message": get_message},
            "plugins": {
                "denormalizer": {
                    "schema": {
                        "author": "user",
                        "recipient": "user",
                        "visibleTo": ["user"],
                        "nestedData": {"comments": ["comment"]},
                    },
                },
            },
        },
    },
    {"max_depth": 3},
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    print(asyncio.run(api["message"]["get_message"]("x")))
