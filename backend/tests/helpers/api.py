"""Thin wrapper over the Flask test client for the ``/api/v1`` surface."""

from __future__ import annotations

from typing import Any

from tests.factories.user import DEFAULT_PASSWORD

API = "/api/v1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ApiClient:
    """Issue JSON requests and keep the last login's tokens at hand."""

    def __init__(self, client) -> None:
        self.client = client

    def call(self, method: str, path: str, *, token: str | None = None, **kwargs: Any):
        headers = dict(kwargs.pop("headers", {}) or {})
        if token:
            headers.update(bearer(token))
        return self.client.open(f"{API}{path}", method=method, headers=headers, **kwargs)

    def get(self, path: str, **kwargs: Any):
        return self.call("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any):
        return self.call("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any):
        return self.call("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any):
        return self.call("DELETE", path, **kwargs)

    # ------------------------------ Auth flows ------------------------------

    def register(
        self,
        email: str,
        *,
        name: str = "Test User",
        password: str = DEFAULT_PASSWORD,
        token: str | None = None,
        **extra: Any,
    ):
        payload = {"name": name, "email": email, "password": password, **extra}
        return self.post("/auth/register", json=payload, token=token)

    def login(self, email: str, password: str = DEFAULT_PASSWORD):
        return self.post("/auth/login", json={"email": email, "password": password})

    def tokens_for(self, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        """Log in and return ``{"access": ..., "refresh": ...}``; asserts success."""
        resp = self.login(email, password)
        assert resp.status_code == 200, resp.get_json()
        data = resp.get_json()["data"]
        return {"access": data["accessToken"], "refresh": data["refreshToken"]}

    def create_task(self, token: str, **fields: Any):
        payload = {"title": "Task", **fields}
        return self.post("/tasks", json=payload, token=token)
