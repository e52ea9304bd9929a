from __future__ import annotations

from productivity_api.run import create_app
from productivity_api.storage.memory import MemoryStorage

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "STORAGE_BACKEND": "memory",
}

USER_PAYLOAD = {
    "name": "Ada Lovelace",
    "username": "ada",
    "email": "ada@analytical.org",
    "password": "analytical-engine",
    "confirmPassword": "analytical-engine",
}


def make_app(storage=None):
    return create_app(config=dict(TEST_CONFIG), storage=storage or MemoryStorage())


def register(client, **overrides):
    """Зарегистрировать пользователя через /api/auth/register (с сессией)"""
    payload = dict(USER_PAYLOAD)
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)
