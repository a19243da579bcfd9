from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)

Filter = tuple[str, str, Any]

_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "in", "is"}


class SupabaseError(RuntimeError):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None


def _render_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote_list_item(value: Any) -> str:
    # PostgREST list items are double-quoted so "," and ")" stay literal
    escaped = _render_value(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _filter_params(filters: Iterable[Filter]) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    for column, op, value in filters:
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator '{op}'")
        if op == "in":
            rendered = "(" + ",".join(_quote_list_item(item) for item in value) + ")"
        else:
            rendered = _render_value(value)
        params.append((column, f"{op}.{rendered}"))
    return params


def _parse_content_range(header: str | None) -> int:
    # PostgREST sends "0-24/3573" or "*/0"
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1]
    try:
        return int(total)
    except ValueError:
        return 0


class SupabaseClient:
    """Thin async client for the Supabase auth and PostgREST endpoints.

    Constructed once per application lifespan and passed to handlers; call
    :meth:`aclose` on shutdown.
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        *,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url or not service_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")
        self._service_key = service_key
        self._http = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            timeout=timeout_s,
            transport=transport,
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            },
        )

    @classmethod
    def from_settings(cls, cfg: Settings) -> "SupabaseClient":
        return cls(
            cfg.supabase_url or "",
            cfg.supabase_service_role_key or "",
            timeout_s=cfg.supabase_timeout_s,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("supabase_request_failed method=%s path=%s: %s", method, path, exc)
            raise SupabaseError(f"Database request failed: {exc}") from exc
        if response.is_error:
            message = response.text
            try:
                body = response.json()
                if isinstance(body, dict):
                    message = body.get("message") or body.get("msg") or body.get("error") or message
            except ValueError:
                pass
            logger.warning(
                "supabase_request_error method=%s path=%s status=%s: %s",
                method,
                path,
                response.status_code,
                message,
            )
            raise SupabaseError(f"Database error: {message}", status_code=response.status_code)
        return response

    async def get_user(self, token: str) -> AuthUser | None:
        if not token:
            return None
        try:
            response = await self._http.get("/auth/v1/user", headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as exc:
            raise SupabaseError(f"Auth request failed: {exc}") from exc
        if response.status_code in (401, 403, 404):
            return None
        if response.is_error:
            raise SupabaseError("Auth request failed", status_code=response.status_code)
        data = response.json()
        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            return None
        return AuthUser(id=str(user_id), email=data.get("email"))

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params = [("select", columns), *_filter_params(filters)]
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        response = await self._request("GET", f"/rest/v1/{table}", params=params)
        rows = response.json()
        return rows if isinstance(rows, list) else []

    async def select_one(
        self,
        table: str,
        filters: Sequence[Filter],
        *,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        rows = await self.select(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    async def count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        params = [("select", "*"), *_filter_params(filters)]
        response = await self._request(
            "HEAD",
            f"/rest/v1/{table}",
            params=params,
            headers={"Prefer": "count=exact"},
        )
        return _parse_content_range(response.headers.get("content-range"))

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if isinstance(rows, list):
            if not rows:
                raise SupabaseError(f"Insert into '{table}' returned no rows")
            return rows[0]
        return rows

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        if not filters:
            raise ValueError("update requires at least one filter")
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=_filter_params(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        return rows if isinstance(rows, list) else []
