from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

import store.session_store as session_store
from api.models import User

Role = Literal["admin", "customer"]
ROLES = ("admin", "customer")


def _resolve_role(value: Optional[str]) -> Optional[Role]:
    return value if value in ROLES else None


@dataclass
class Session:
    """
    Credential and role of the logged-in user.

    One instance is created by the app and handed to every api client and
    view model; nothing looks it up globally.

    Fields:
      - token: bearer credential, None when logged out
      - role: "admin" | "customer" | None if not resolved
      - name: display name of the user
    """

    token: Optional[str] = None
    role: Optional[Role] = None
    name: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.role is not None

    async def restore(self) -> bool:
        """Load a stored session. Returns True if one could be resumed."""
        values = await session_store.load()
        self.token = values.get(session_store.TOKEN_KEY)
        self.role = _resolve_role(values.get(session_store.ROLE_KEY))
        self.name = values.get(session_store.NAME_KEY)
        return self.is_authenticated

    async def start(self, token: str, user: User) -> None:
        self.token = token
        self.role = _resolve_role(user.role)
        self.name = user.name or user.email or None
        await session_store.save(
            {
                session_store.TOKEN_KEY: self.token,
                session_store.ROLE_KEY: self.role,
                session_store.NAME_KEY: self.name,
            }
        )

    async def end(self) -> None:
        """
        Forget the credential, in memory and on disk.
        This is only called upon logging out
        """
        self.token = None
        self.role = None
        self.name = None
        await session_store.clear()
