# durable key/value storage for the login session ("token", "role", ...)
from __future__ import annotations

from typing import Dict, Iterable, Optional

from store.database import connect

TOKEN_KEY = "token"
ROLE_KEY = "role"
NAME_KEY = "name"

SESSION_KEYS = (TOKEN_KEY, ROLE_KEY, NAME_KEY)


async def load() -> Dict[str, str]:
    """Return every stored session value keyed by name."""
    async with connect() as conn:
        cur = await conn.execute("SELECT key, value FROM session;")
        rows = await cur.fetchall()
        await cur.close()
    return {row[0]: row[1] for row in rows}


async def save(values: Dict[str, Optional[str]]) -> None:
    """
    Upsert the given values; a None value removes its key.
    """
    async with connect() as conn:
        for key, value in values.items():
            if value is None:
                await conn.execute("DELETE FROM session WHERE key = ?;", (key,))
            else:
                await conn.execute(
                    "INSERT INTO session(key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value;",
                    (key, value),
                )
        await conn.commit()


async def clear(keys: Iterable[str] = SESSION_KEYS) -> None:
    """Remove the session keys, used on logout."""
    async with connect() as conn:
        await conn.executemany(
            "DELETE FROM session WHERE key = ?;", [(k,) for k in keys]
        )
        await conn.commit()
