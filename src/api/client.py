# authenticated json access to the inventory REST api
from __future__ import annotations

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

import httpx

from api import models
from api.errors import (
    MalformedResponse,
    NetworkUnreachable,
    RequestFailed,
    Unauthenticated,
)
from utils.config import Settings
from utils.logger import get_logger
from utils.state import Session

_logger = get_logger(__name__)

R = TypeVar("R")

# kind -> (path, singular envelope key, parser)
RESOURCES: Dict[str, tuple] = {
    "products": ("/api/products", "product", models.Product.from_json),
    "stocks": ("/api/stocks", "stock", models.Stock.from_json),
    "suppliers": ("/api/suppliers", "supplier", models.Supplier.from_json),
    "orders": ("/api/orders", "order", models.Order.from_json),
}


def _server_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return response.text.strip() or response.reason_phrase or "Request failed"


class ApiClient:
    """
    Owns the http connection pool. Every call goes through `request`, which
    attaches the session's bearer token and maps failures onto api.errors.
    No retries are made; callers decide.
    """

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = settings or Settings()
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=settings.api_url,
            timeout=settings.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def resource(self, kind: str) -> ResourceClient:
        path, singular, parse = RESOURCES[kind]
        return ResourceClient(self, kind, path, singular, parse)

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        auth: bool = True,
    ) -> Any:
        """
        Issue one request and return the decoded json body (None if empty).
        """
        headers = {}
        if auth:
            if not self.session.token:
                raise Unauthenticated()
            headers["Authorization"] = f"Bearer {self.session.token}"

        _logger.debug(f"{method} {path}")
        try:
            response = await self._http.request(
                method, path, json=json, headers=headers
            )
        except httpx.DecodingError as exc:
            raise MalformedResponse(
                f"{method} {path} returned a body that could not be decoded"
            ) from exc
        except httpx.RequestError as exc:
            _logger.warning(f"{method} {path} unreachable: {exc!r}")
            raise NetworkUnreachable(
                "Failed to connect to server. Please try again later."
            ) from exc

        if response.status_code == 401:
            raise Unauthenticated(_server_message(response))
        if not response.is_success:
            message = _server_message(response)
            _logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise RequestFailed(response.status_code, message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(
                f"{method} {path} returned a body that is not json"
            ) from exc


class ResourceClient(Generic[R]):
    """Typed CRUD for one record kind (products, stocks, suppliers, orders)."""

    def __init__(
        self,
        api: ApiClient,
        kind: str,
        path: str,
        singular: str,
        parse: Callable[[Dict[str, Any]], R],
    ) -> None:
        self.api = api
        self.kind = kind
        self.path = path
        self._singular = singular
        self._parse = parse

    def _url(self, *parts: str) -> str:
        return "/".join([self.path, *(p for p in parts if p)])

    def _parse_one(self, body: Any) -> R:
        if isinstance(body, dict) and isinstance(body.get(self._singular), dict):
            body = body[self._singular]
        try:
            return self._parse(body)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedResponse(f"Unexpected {self.kind} record: {exc}") from exc

    def _parse_many(self, body: Any) -> List[R]:
        if isinstance(body, dict) and isinstance(body.get(self.kind), list):
            body = body[self.kind]
        if not isinstance(body, list):
            raise MalformedResponse(f"Expected a list of {self.kind}")
        return [self._parse_one(doc) for doc in body]

    async def fetch_list(self, subpath: str = "") -> List[R]:
        return self._parse_many(await self.api.request("GET", self._url(subpath)))

    async def create(self, payload: Dict[str, Any]) -> R:
        return self._parse_one(
            await self.api.request("POST", self.path, json=payload)
        )

    async def update(
        self, record_id: str, payload: Dict[str, Any], subpath: str = ""
    ) -> R:
        return self._parse_one(
            await self.api.request(
                "PUT", self._url(record_id, subpath), json=payload
            )
        )

    async def remove(self, record_id: str) -> bool:
        await self.api.request("DELETE", self._url(record_id))
        return True
