import os
from dataclasses import dataclass, field


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


@dataclass
class Settings:
    """
    Runtime configuration, each field overridable through the environment.

    Fields:
      - api_url: base URL of the inventory REST API
      - timeout: per-request timeout in seconds
      - poll_interval_ms: admin order list refresh cadence
      - db_path: sqlite file holding the persisted session
      - currency: symbol prefixed to every money value
    """

    api_url: str = field(
        default_factory=lambda: _env("INVDASH_API_URL", "http://localhost:4000")
    )
    timeout: float = field(
        default_factory=lambda: float(_env("INVDASH_TIMEOUT", "10"))
    )
    poll_interval_ms: int = field(
        default_factory=lambda: int(_env("INVDASH_POLL_INTERVAL_MS", "5000"))
    )
    db_path: str = field(
        default_factory=lambda: _env("INVDASH_DB_PATH", "data/session.sqlite")
    )
    currency: str = field(default_factory=lambda: _env("INVDASH_CURRENCY", "₹"))
