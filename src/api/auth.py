from __future__ import annotations

from typing import Any, Dict, Tuple

from api.client import ApiClient
from api.errors import MalformedResponse
from api.models import User

# ---------------------------
# Auth & Registration
# ---------------------------


async def login(api: ApiClient, email: str, password: str) -> Tuple[str, User]:
    """
    Exchange credentials for a bearer token.
    Returns (token, user); raises RequestFailed with the server's message.
    """
    body = await api.request(
        "POST",
        "/api/auth/login",
        json={"email": email, "password": password},
        auth=False,
    )
    if not isinstance(body, dict) or not body.get("token"):
        raise MalformedResponse("Login response did not include a token.")
    return str(body["token"]), User.from_json(body.get("user") or {})


async def register(
    api: ApiClient, name: str, email: str, password: str
) -> Dict[str, Any]:
    """Create a customer account; returns the server's user summary."""
    body = await api.request(
        "POST",
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
        auth=False,
    )
    return body if isinstance(body, dict) else {}
